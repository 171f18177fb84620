"""
Factory Boy factories for payment test data.

Usage:
    from payments.tests.factories import PaymentFactory

    # INITIATED payment for a new team
    payment = PaymentFactory()

    # Payment already in a terminal status
    payment = PaymentFactory(status=PaymentStatus.SUCCESS)

    # Payment for a specific team
    payment = PaymentFactory(team=team, provider_ref="trans_123")
"""

import factory

from hackathon.tests.factories import TeamFactory
from payments.models import Payment
from payments.state_machines import PaymentProvider, PaymentStatus


class PaymentFactory(factory.django.DjangoModelFactory):
    """
    Factory for creating Payment instances.

    Default: INITIATED, 1000 XAF, provider_ref distinct from reference.
    """

    class Meta:
        model = Payment

    team = factory.SubFactory(TeamFactory)
    amount = 1000
    currency = "XAF"
    provider = PaymentProvider.FAPSHI
    provider_ref = factory.Sequence(lambda n: f"trans_{n:08d}")
    reference = factory.LazyAttributeSequence(
        lambda o, n: f"HACKATHON-{o.team.id}-{1718000000000 + n}"
    )
    status = PaymentStatus.INITIATED
    raw_payload = factory.LazyFunction(dict)

"""
Hackathon app: team registration, receipts and administration.

This app handles:
- Team registration with members and optional volunteer referral
- Starting the registration-fee payment (through payments.adapters)
- Public receipts
- Admin team management and volunteer referral links

Related apps:
    - payments: Payment records and webhook reconciliation
"""

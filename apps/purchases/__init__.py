"""
Purchases App - Hire-Purchase Agreements and Payments

This app manages instalment purchases of shop customers, the payments made
against them and the confirmation workflow for money collected in the field.

Key Features:
- Purchase pricing from the shop policy (flat or monthly interest)
- Per-customer purchase numbering (HP-0001, HP-0002, ...)
- Down payments recorded as confirmed cash payments
- Collector sales that take over unassigned customers
- Collector payments that wait for shop admin confirmation
- Receipts and CSV exports of payments, purchases, customers and products
- Daily overdue sweep (``mark_overdue_purchases``)

Architecture:
- Models: Purchase, PurchaseItem, Payment
- Services: pricing, purchase management, payment recording,
  payment confirmation, receipts, exports, overdue sweep
- Views: RESTful API with ViewSets scoped by shop slug
- Exceptions: Domain exception hierarchy rendered by the project handler
"""

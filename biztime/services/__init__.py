# Services package init
"""
BizTime Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the database (persistence).
How:   Services take an AsyncSession plus validated schemas and return
       response schemas. They raise BizTimeError subclasses, never HTTP errors.

Service Inventory:
    - CompanyService: company CRUD, code derivation from the name
    - InvoiceService: invoice CRUD and the locked payment-state update
    - payment_state:  the pure rule deriving paid_date on update
    - db_errors:      SQLAlchemy exception → BizTimeError translation
"""

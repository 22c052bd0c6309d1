"""
BizTime Backend — API Routes Package
======================================

Route Inventory:
    - companies.py: GET/POST   /companies
                    GET/PUT/DELETE /companies/{code}
    - invoices.py:  GET/POST   /invoices
                    GET/PUT/DELETE /invoices/{id}
    - health.py:    GET        /health

Routes stay thin: parse the request, call the service, wrap the result in
its response envelope. Status codes for failures come from the exception
handlers in main.py.
"""

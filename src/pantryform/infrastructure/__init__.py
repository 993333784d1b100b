"""Infrastructure layer — workbooks, counter database, barcode, PDF export.

This layer depends on stdlib and third-party libs (openpyxl, SQLAlchemy,
httpx, reportlab). The service layer bridges between domain models and
infrastructure.
"""

"""
Client for the Astute Payroll SOAP web service.
"""

__version__ = "0.1.0"

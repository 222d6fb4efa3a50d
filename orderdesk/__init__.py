"""
OrderDesk - persistence core for customers, products and orders
"""
__version__ = "1.0.0"

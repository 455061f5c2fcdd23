"""
Поиск по политикам и документам компании
"""
__version__ = "1.0.0"

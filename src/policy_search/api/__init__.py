"""
API модуль - HTTP сервис поиска
"""

"""
DTOs de la aplicacion.
"""

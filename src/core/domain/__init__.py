"""Modelos, enums y errores del dominio.

Por qué:
- Aquí viven el sobre de invocación y la configuración del endpoint.
- El dominio no conoce httpx, ssl ni la CLI: solo conceptos del problema.
"""

"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan los bindings concretos.
- Permite que la CLI y los tests dependan del contrato y no del adaptador HTTP.
"""

"""Core del binding: configuración, dominio y contratos."""

"""Adaptadores de I/O: material TLS, cliente httpx y el binding HTTP."""

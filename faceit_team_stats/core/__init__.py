"""Core domain: ports, services and pure policies."""

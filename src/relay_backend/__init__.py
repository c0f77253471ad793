"""Relay backend: credential-gated proxies for messaging, storage, Google and Gemini."""

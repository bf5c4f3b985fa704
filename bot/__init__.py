"""
WhatsApp bot runtime: configuration, persistence, transport and web server.
"""

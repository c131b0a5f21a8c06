"""
internalloggin/
Logging interno do serviço de discovery (console + arquivo rotativo).
"""

"""
Calculator page: form definition, display formatting and templates.
"""

"""Security tests for PaperBank

- SQL injection and LIKE wildcard handling on search endpoints
- Authentication bypass and privilege escalation attempts
"""

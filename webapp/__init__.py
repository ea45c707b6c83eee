"""
Web application served by the Fargate service.

Listens on port 3000 behind the ALB and reports its own and the database's health.
"""

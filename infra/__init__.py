"""
Pulumi infrastructure-as-code for the ecrproj container application.

This package defines AWS infrastructure including:
- VPC with public, private and isolated subnet tiers
- RDS MySQL in the isolated tier, credentials in Secrets Manager
- ECR repository and Fargate service behind an internet-facing ALB
- REST API Gateway proxying to the ALB
"""

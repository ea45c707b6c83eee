"""
Pulumi component resources for ecrproj infrastructure.

Each submodule provides reusable ComponentResource classes:
- networking: VPC, subnet tiers, NAT, security groups
- security: IAM roles, Secrets Manager
- storage: RDS MySQL, ECR repository
- compute: ALB, Fargate service
- edge: API Gateway
"""

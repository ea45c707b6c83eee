"""
ecrproj Architecture Diagram.

Renders the deployed topology: API Gateway and the internet-facing ALB in
front of a Fargate service in private subnets, MySQL in isolated subnets.

Dependencies:
    pip install -e ".[diagram]"   (diagrams, plus the graphviz binary)

Usage:
    python -m infra.architecture_diagram
    # Outputs: ecrproj_architecture.png
"""

from diagrams import Cluster, Diagram, Edge
from diagrams.aws.compute import ECR, ECS, Fargate
from diagrams.aws.database import RDS
from diagrams.aws.general import Users
from diagrams.aws.management import Cloudwatch
from diagrams.aws.network import (
    ALB,
    APIGateway,
    InternetGateway,
    NATGateway,
    PrivateSubnet,
    PublicSubnet,
)
from diagrams.aws.security import IAMRole, SecretsManager

graph_attr = {
    "fontsize": "14",
    "bgcolor": "white",
    "pad": "0.5",
    "splines": "ortho",
    "nodesep": "0.8",
    "ranksep": "1.2",
    "dpi": "300",
}

node_attr = {
    "fontsize": "11",
    "height": "1.2",
    "width": "1.5",
}

edge_attr = {
    "fontsize": "9",
}

DEFAULT_FILENAME = "ecrproj_architecture"


def render(filename: str = DEFAULT_FILENAME, show: bool = False) -> str:
    """
    Draw the architecture to `<filename>.png`.

    Returns:
        str: Path of the generated image
    """
    with Diagram(
        "ecrproj Architecture\n(API Gateway, ALB, Fargate, RDS MySQL)",
        filename=filename,
        show=show,
        direction="TB",
        graph_attr=graph_attr,
        node_attr=node_attr,
        edge_attr=edge_attr,
    ):
        users = Users("Users\n(Internet)")

        with Cluster("Edge (Outside VPC)"):
            api_gateway = APIGateway("API Gateway\nStage: prod\nANY / and /{proxy+}")

        with Cluster("AWS Managed Services"):
            ecr = ECR("ECR Repository\nweb:latest\nScan on push")
            secrets = SecretsManager("Secrets Manager\nDB credentials\nusername / password")
            logs = Cloudwatch("CloudWatch Logs\n/ecs/<name>\n1 week retention")
            execution_role = IAMRole("Task Execution Role\nECR pull, logs\nGetSecretValue")

        with Cluster("VPC: 10.0.0.0/16 (up to 3 AZs)"):
            igw = InternetGateway("Internet Gateway")

            with Cluster("Public Subnets (/24 per AZ)"):
                PublicSubnet("Public Subnet")
                alb = ALB("Application LB\nInternet-facing\nHTTP :80")
                nat = NATGateway("NAT per AZ\nGateway (prod)\nInstance (dev/staging)")

            with Cluster("Private Subnets (/24 per AZ)"):
                PrivateSubnet("Private Subnet")
                cluster = ECS("ECS Cluster")
                service = Fargate("Fargate Service\ncontainer 'web'\nPort 3000")

            with Cluster("Isolated Subnets (/24 per AZ, no internet route)"):
                PrivateSubnet("Isolated Subnet")
                database = RDS("RDS MySQL 8.0\nMyDatabase\nPort 3306")

        users >> Edge(label="HTTPS", color="orange", style="bold") >> api_gateway
        users >> Edge(label="HTTP :80", color="orange") >> igw >> alb
        api_gateway >> Edge(label="HTTP_PROXY\nhttp://<alb dns>", color="green", style="bold") >> alb
        alb >> Edge(label="Target group (ip)\n:3000", color="green", style="bold") >> service
        cluster - Edge(style="dotted") - service
        service >> Edge(label="SQL :3306", color="darkblue", style="dashed") >> database
        service >> Edge(label="Outbound", color="gray", style="dashed") >> nat >> igw
        service >> Edge(label="awslogs", color="gray", style="dotted") >> logs
        ecr >> Edge(label="Pull image", color="lightblue", style="dotted") >> service
        secrets >> Edge(label="RDS_USERNAME\nRDS_PASSWORD", color="gold", style="dashed") >> service
        execution_role >> Edge(label="Assumed by ECS", color="gray", style="dotted") >> service

    return f"{filename}.png"


if __name__ == "__main__":
    path = render()
    print(f"Diagram generated: {path}")

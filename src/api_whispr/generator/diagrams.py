"""Mermaid flow templates and reply cleanup for diagram generation."""

import re

from pydantic import BaseModel

MIN_DIAGRAM_LENGTH = 20

_ONLY_CODE = "Only return Mermaid code inside triple backticks."


class FlowTemplate(BaseModel):
    pattern: str
    diagram_type: str  # sequence / er
    prompt: str


class Diagram(BaseModel):
    mermaid_code: str
    flow_type: str
    diagram_type: str
    pattern: str
    warning: str | None = None


def _sequence_prompt(flow: str, steps: str) -> str:
    return (
        "Create a Mermaid **sequence diagram** showing this flow based on the OpenAPI spec below:\n\n"
        f'Flow Pattern: "{flow}"\n\n{steps}\n\n{_ONLY_CODE}'
    )


FLOW_TEMPLATES: dict[str, FlowTemplate] = {
    "user_auth": FlowTemplate(
        pattern="User Authentication Flow: Login → Token → Profile",
        diagram_type="sequence",
        prompt=_sequence_prompt(
            "Login → Token → Fetch Profile",
            "Show the complete authentication flow:\n"
            "1. User submits credentials (POST /auth/login or similar)\n"
            "2. API validates and returns JWT token or session\n"
            "3. User fetches profile using auth token (GET /user/profile or similar)\n\n"
            "Use realistic endpoints from the spec. Show auth headers, request/response payloads, and error cases.",
        ),
    ),
    "crud_flow": FlowTemplate(
        pattern="CRUD Operations Flow: Create → Read → Update → Delete",
        diagram_type="sequence",
        prompt=_sequence_prompt(
            "Create → Read → Update → Delete",
            "Show typical CRUD operations for a main resource:\n"
            "1. POST to create new resource\n"
            "2. GET to read/fetch resource\n"
            "3. PUT/PATCH to update resource\n"
            "4. DELETE to remove resource\n\n"
            "Use actual endpoints from the spec (e.g., POST /users, GET /users/{id}, PUT /users/{id}, "
            "DELETE /users/{id}). Show realistic request/response data.",
        ),
    ),
    "checkout_flow": FlowTemplate(
        pattern="Order Checkout Flow: Cart → Payment → Confirmation",
        diagram_type="sequence",
        prompt=_sequence_prompt(
            "Cart → Payment → Confirmation",
            "Show the e-commerce checkout process:\n"
            "1. Add items to cart (POST /cart or similar)\n"
            "2. Review cart contents (GET /cart)\n"
            "3. Process payment (POST /payments or /checkout)\n"
            "4. Confirm order (GET /orders/{id} or confirmation endpoint)\n\n"
            "Use realistic endpoints from the spec. Show payment processing, validation steps, "
            "and success/error responses.",
        ),
    ),
    "oauth_flow": FlowTemplate(
        pattern="OAuth 2.0 Authorization Flow: Client → Auth Server → Token",
        diagram_type="sequence",
        prompt=_sequence_prompt(
            "OAuth 2.0 Authorization Flow",
            "Show the complete OAuth 2.0 flow:\n"
            "1. Client redirects user to authorization server\n"
            "2. User grants permission\n"
            "3. Auth server returns authorization code\n"
            "4. Client exchanges code for access token\n"
            "5. Client uses token to access protected resources\n\n"
            "Use OAuth endpoints from the spec (/oauth/authorize, /oauth/token, etc.). "
            "Show realistic OAuth parameters and responses.",
        ),
    ),
    "microservice_chain": FlowTemplate(
        pattern="Microservice Call Chain: API Gateway → Service A → Database",
        diagram_type="sequence",
        prompt=_sequence_prompt(
            "Microservice Architecture Call Chain",
            "Show how requests flow through microservices:\n"
            "1. Client request to API Gateway\n"
            "2. Gateway routes to appropriate service\n"
            "3. Service processes and queries database\n"
            "4. Response flows back through the chain\n\n"
            "Use realistic service endpoints from the spec. Show inter-service communication, "
            "data validation, and response aggregation.",
        ),
    ),
    "entity_relationship": FlowTemplate(
        pattern="Entity Relationship Diagram: Models & Database Schemas",
        diagram_type="er",
        prompt=(
            "Create a Mermaid **erDiagram** showing this based on the OpenAPI spec below:\n\n"
            'Flow Pattern: "Database Entity Relationships"\n\n'
            "Show the data model relationships:\n"
            "1. Extract entities from API schemas/models\n"
            "2. Show primary keys, foreign keys, and relationships\n"
            "3. Include important fields and data types\n"
            "4. Show one-to-many, many-to-many relationships\n\n"
            "Use actual schema definitions from the spec. Focus on the main business entities "
            f"and their relationships.\n\n{_ONLY_CODE}"
        ),
    ),
}

FALLBACK_DIAGRAM = """sequenceDiagram
    participant Client
    participant API
    participant Database

    Client->>API: Request
    API->>Database: Query
    Database-->>API: Data
    API-->>Client: Response

    Note over Client,Database: Generic API Flow"""


def extract_mermaid(text: str) -> str:
    """Pull Mermaid code out of a reply, falling back to the generic diagram when too short."""
    match = re.search(r"```(?:mermaid)?\n?(.*?)```", text, re.DOTALL)
    code = match.group(1).strip() if match else text.strip()
    if len(code) < MIN_DIAGRAM_LENGTH:
        return FALLBACK_DIAGRAM
    return code


def fallback_diagram(flow_type: str, diagram_type: str = "sequence") -> Diagram:
    return Diagram(
        mermaid_code=FALLBACK_DIAGRAM,
        flow_type=flow_type,
        diagram_type=diagram_type,
        pattern="Generic API Flow (Fallback)",
        warning="Used fallback diagram due to generation error",
    )

"""
Requirements constructor — option catalogs.

Static option lists offered by the constructor form, plus the backend
framework compatibility map used to narrow some of them. Each field group
has ``choices`` (single pick, overridable with free text) and/or
``options`` (multi-select, in pick order).
"""

from typing import Dict, List, Optional

from app.constructor.fields import FieldKey


FRONTEND_FRAMEWORKS = [
    "React", "Vue", "Next.js", "Nuxt.js", "Svelte", "Angular", "Remix", "Astro", "Solid.js",
]

BACKEND_FRAMEWORKS = [
    "Node.js/Express", "FastAPI", "Django", "Flask", "NestJS", "Fastify", "Koa", "Hapi",
    "Spring Boot", "ASP.NET Core",
]

DATABASES = [
    "PostgreSQL", "MySQL", "MongoDB", "Redis", "SQLite", "MariaDB", "Cassandra", "DynamoDB",
    "Elasticsearch", "Neo4j",
]

DATABASE_MIGRATIONS = [
    "Alembic (Python)", "Django Migrations", "Flask-Migrate", "Laravel Migrations",
    "Rails Migrations", "TypeORM Migrations", "Prisma Migrate", "Sequelize Migrations",
    "Knex.js Migrations", "Flyway", "Liquibase", "db-migrate",
]

MESSAGING_SYSTEMS = [
    "RabbitMQ", "Apache Kafka", "Redis Pub/Sub", "Amazon SQS", "Amazon SNS",
    "Azure Service Bus", "Google Pub/Sub", "NATS", "Apache Pulsar", "ActiveMQ",
]

CACHING_STRATEGIES = [
    "In-memory caching (Redis)", "Distributed caching", "Cache-aside pattern",
    "Write-through caching", "Write-behind caching", "Cache invalidation strategy",
    "TTL-based expiration", "LRU eviction policy", "CDN caching", "Application-level caching",
]

API_GATEWAYS = [
    "Kong", "AWS API Gateway", "Azure API Management", "Nginx", "Traefik", "Envoy", "Zuul",
    "Ambassador",
]

API_CONTRACTS = ["OpenAPI/Swagger", "GraphQL", "REST", "gRPC", "tRPC", "JSON-RPC"]

TESTING_FRAMEWORKS = [
    "Jest", "Vitest", "Mocha", "Chai", "Pytest", "JUnit", "Cypress", "Playwright", "Selenium",
]

API_TESTING_TOOLS = [
    "Axios", "cURL", "Postman", "Insomnia", "REST Assured", "Supertest", "Newman", "Karate",
    "Pact",
]

AI_FRAMEWORKS = [
    "LangChain", "LlamaIndex", "Haystack", "Semantic Kernel", "AutoGPT", "BabyAGI",
    "LangGraph", "CrewAI",
]

VECTOR_DATABASES = [
    "Qdrant (local)", "Qdrant (cloud)", "Pinecone", "Weaviate", "Milvus", "Chroma", "FAISS",
    "Elasticsearch (vector)", "PGVector", "Redis (vector)",
]

AI_TESTING_TOOLS = ["LangSmith", "Weights & Biases", "MLflow", "Evidently AI", "Giskard", "Kolena"]

OBSERVABILITY_TOOLS = [
    "Prometheus", "Grafana", "Datadog", "New Relic", "Sentry", "ELK Stack", "Loki", "Jaeger",
    "Zipkin",
]

VALIDATION_LIBRARIES = [
    "Joi", "Yup", "Zod", "class-validator", "express-validator", "validator.js", "ajv",
    "joi-express", "express-joi-validation", "celebrate", "marshmallow", "pydantic",
    "cerberus", "voluptuous",
]

# ── Multi-select guidance options ─────────────────────────────────────────
API_TESTING_OPTIONS = [
    "Prefer OpenAPI-driven API tests.",
    "Curl examples must be runnable.",
    "Axios or curl-based tests are acceptable if they map cleanly to Postman collections.",
]

AI_FRAMEWORK_OPTIONS = [
    "Use LangChain for AI features.",
    "Allowed: prompt templates, chains, tool calling.",
    "Avoid autonomous agents unless explicitly requested.",
    "Isolate AI logic behind clear service boundaries.",
    "Prompts must be versioned.",
    "Provide offline / mock mode for tests.",
    "Do not call real LLMs in CI by default.",
    "Ask before adding new mock frameworks or prompt-evaluation strategies.",
]

AI_TESTING_OPTIONS = [
    "Mock LLM calls by default.",
    "Validate structure, schema, and contracts rather than exact text.",
    "Explicitly test timeout and degraded-response scenarios.",
]

OBSERVABILITY_OPTIONS = [
    "Structured JSON logging.",
    "Request ID propagation across services.",
    "Metrics endpoint required.",
    "Health check endpoints required.",
]

SECURITY_DEFAULTS = [
    "HTTPS Only", "CORS Configuration", "Rate Limiting", "Input Validation",
    "SQL Injection Protection", "XSS Protection", "CSRF Protection",
    "Authentication/Authorization", "Secrets Management", "Security Headers",
]

FAILURE_FIRST_OPTIONS = [
    "Circuit Breaker Pattern", "Retry with Exponential Backoff", "Graceful Degradation",
    "Health Checks", "Dead Letter Queues", "Bulkhead Pattern", "Timeout Handling",
    "Fallback Mechanisms",
]

TESTING_PHILOSOPHY_OPTIONS = [
    "Focus on E2E testing only.",
    "Generate Playwright tests for user-facing behavior changes.",
    "Ask before generating tests when impact is unclear.",
    "When implementing features, reason through how tests validate correctness.",
    "Add negative tests and explicitly test failure paths.",
    "Simulate partial outages where relevant (e.g., downstream service failure, LLM timeout).",
    "Cursor should verify its own work by reasoning through how Playwright tests would pass or fail.",
]

DOCKER_ENV_OPTIONS = [
    "Docker-first development.",
    "Use docker-compose for local environments.",
    "Local Postgres runs via Docker Compose.",
    "Schema changes require migrations.",
    "Use `.env` files with validation.",
    "Never hardcode secrets.",
]


# ── Field group → catalogs ────────────────────────────────────────────────
FIELD_CHOICES: Dict[FieldKey, List[str]] = {
    FieldKey.FRONTEND_FRAMEWORK: FRONTEND_FRAMEWORKS,
    FieldKey.BACKEND_FRAMEWORK: BACKEND_FRAMEWORKS,
    FieldKey.DATABASE: DATABASES,
    FieldKey.DATABASE_MIGRATIONS: DATABASE_MIGRATIONS,
    FieldKey.MESSAGING: MESSAGING_SYSTEMS,
    FieldKey.API_GATEWAY: API_GATEWAYS,
    FieldKey.API_CONTRACTS: API_CONTRACTS,
    FieldKey.TESTING_FRAMEWORK: TESTING_FRAMEWORKS,
    FieldKey.API_TESTING: API_TESTING_TOOLS,
    FieldKey.AI_FRAMEWORK: AI_FRAMEWORKS,
    FieldKey.VECTOR_DATABASE: VECTOR_DATABASES,
    FieldKey.AI_TESTING: AI_TESTING_TOOLS,
    FieldKey.OBSERVABILITY: OBSERVABILITY_TOOLS,
    FieldKey.MODEL_VALIDATION: VALIDATION_LIBRARIES,
}

FIELD_OPTIONS: Dict[FieldKey, List[str]] = {
    FieldKey.CACHING_STRATEGY: CACHING_STRATEGIES,
    FieldKey.API_TESTING: API_TESTING_OPTIONS,
    FieldKey.AI_FRAMEWORK: AI_FRAMEWORK_OPTIONS,
    FieldKey.AI_TESTING: AI_TESTING_OPTIONS,
    FieldKey.DOCKER_ENVIRONMENT: DOCKER_ENV_OPTIONS,
    FieldKey.OBSERVABILITY: OBSERVABILITY_OPTIONS,
    FieldKey.SECURITY_DEFAULTS: SECURITY_DEFAULTS,
    FieldKey.FAILURE_FIRST: FAILURE_FIRST_OPTIONS,
    FieldKey.TESTING_PHILOSOPHY: TESTING_PHILOSOPHY_OPTIONS,
}


# ── Backend framework compatibility ───────────────────────────────────────
# Only the groups listed per framework are narrowed; the selected backend's
# list is intersected with the full catalog, keeping catalog order.
_ALL_CACHING = CACHING_STRATEGIES
_CACHING_NO_WRITE_BEHIND = [c for c in CACHING_STRATEGIES if c != "Write-behind caching"]

FRAMEWORK_COMPATIBILITY: Dict[str, Dict[FieldKey, List[str]]] = {
    "Node.js/Express": {
        FieldKey.DATABASE: DATABASES,
        FieldKey.DATABASE_MIGRATIONS: [
            "TypeORM Migrations", "Prisma Migrate", "Sequelize Migrations",
            "Knex.js Migrations", "db-migrate",
        ],
        FieldKey.MESSAGING: [
            "RabbitMQ", "Apache Kafka", "Redis Pub/Sub", "Amazon SQS", "Amazon SNS", "NATS",
            "Apache Pulsar",
        ],
        FieldKey.CACHING_STRATEGY: _ALL_CACHING,
        FieldKey.API_GATEWAY: ["Kong", "AWS API Gateway", "Nginx", "Traefik", "Envoy"],
        FieldKey.TESTING_FRAMEWORK: [
            "Jest", "Vitest", "Mocha", "Chai", "Cypress", "Playwright", "Selenium",
        ],
        FieldKey.API_TESTING: [
            "Axios", "cURL", "Postman", "Insomnia", "Supertest", "Newman", "Karate",
        ],
    },
    "FastAPI": {
        FieldKey.DATABASE: [
            "PostgreSQL", "MySQL", "MongoDB", "Redis", "SQLite", "MariaDB", "Cassandra",
            "DynamoDB", "Elasticsearch",
        ],
        FieldKey.DATABASE_MIGRATIONS: ["Alembic (Python)", "Flyway", "Liquibase"],
        FieldKey.MESSAGING: [
            "RabbitMQ", "Apache Kafka", "Redis Pub/Sub", "Amazon SQS", "Amazon SNS", "NATS",
            "Apache Pulsar",
        ],
        FieldKey.CACHING_STRATEGY: _ALL_CACHING,
        FieldKey.API_GATEWAY: [
            "Kong", "AWS API Gateway", "Azure API Management", "Nginx", "Traefik", "Envoy",
        ],
        FieldKey.TESTING_FRAMEWORK: ["Pytest", "Jest", "Vitest"],
        FieldKey.API_TESTING: [
            "Axios", "cURL", "Postman", "Insomnia", "REST Assured", "Newman", "Karate",
        ],
    },
    "Django": {
        FieldKey.DATABASE: ["PostgreSQL", "MySQL", "SQLite", "MariaDB", "Oracle"],
        FieldKey.DATABASE_MIGRATIONS: [
            "Django Migrations", "Alembic (Python)", "Flyway", "Liquibase",
        ],
        FieldKey.MESSAGING: [
            "RabbitMQ", "Apache Kafka", "Redis Pub/Sub", "Amazon SQS", "Amazon SNS", "NATS",
        ],
        FieldKey.CACHING_STRATEGY: _CACHING_NO_WRITE_BEHIND,
        FieldKey.API_GATEWAY: [
            "Kong", "AWS API Gateway", "Azure API Management", "Nginx", "Traefik", "Envoy",
        ],
        FieldKey.TESTING_FRAMEWORK: ["Pytest", "JUnit"],
        FieldKey.API_TESTING: [
            "Axios", "cURL", "Postman", "Insomnia", "REST Assured", "Newman", "Karate",
        ],
    },
    "Flask": {
        FieldKey.DATABASE: ["PostgreSQL", "MySQL", "MongoDB", "Redis", "SQLite", "MariaDB"],
        FieldKey.DATABASE_MIGRATIONS: [
            "Flask-Migrate", "Alembic (Python)", "Flyway", "Liquibase",
        ],
        FieldKey.MESSAGING: [
            "RabbitMQ", "Apache Kafka", "Redis Pub/Sub", "Amazon SQS", "Amazon SNS", "NATS",
        ],
        FieldKey.CACHING_STRATEGY: _CACHING_NO_WRITE_BEHIND,
        FieldKey.API_GATEWAY: ["Kong", "AWS API Gateway", "Nginx", "Traefik", "Envoy"],
        FieldKey.TESTING_FRAMEWORK: ["Pytest", "Jest"],
        FieldKey.API_TESTING: [
            "Axios", "Postman", "Insomnia", "REST Assured", "Newman", "Karate",
        ],
    },
    "NestJS": {
        FieldKey.DATABASE: [
            "PostgreSQL", "MySQL", "MongoDB", "Redis", "SQLite", "MariaDB", "Cassandra",
        ],
        FieldKey.DATABASE_MIGRATIONS: [
            "TypeORM Migrations", "Prisma Migrate", "Sequelize Migrations",
            "Knex.js Migrations",
        ],
        FieldKey.MESSAGING: [
            "RabbitMQ", "Apache Kafka", "Redis Pub/Sub", "Amazon SQS", "Amazon SNS", "NATS",
        ],
        FieldKey.CACHING_STRATEGY: _CACHING_NO_WRITE_BEHIND,
        FieldKey.API_GATEWAY: ["Kong", "AWS API Gateway", "Nginx", "Traefik", "Envoy"],
        FieldKey.TESTING_FRAMEWORK: ["Jest", "Vitest"],
        FieldKey.API_TESTING: ["Axios", "cURL", "Postman", "Insomnia", "Supertest", "Newman"],
    },
    "Spring Boot": {
        FieldKey.DATABASE: [
            "PostgreSQL", "MySQL", "MongoDB", "Redis", "SQLite", "MariaDB", "Cassandra", "Neo4j",
        ],
        FieldKey.DATABASE_MIGRATIONS: ["Flyway", "Liquibase"],
        FieldKey.MESSAGING: [
            "RabbitMQ", "Apache Kafka", "Redis Pub/Sub", "Amazon SQS", "Amazon SNS",
            "Azure Service Bus", "NATS", "Apache Pulsar", "ActiveMQ",
        ],
        FieldKey.CACHING_STRATEGY: _ALL_CACHING,
        FieldKey.API_GATEWAY: API_GATEWAYS,
        FieldKey.TESTING_FRAMEWORK: ["JUnit", "Jest"],
        FieldKey.API_TESTING: [
            "Axios", "cURL", "Postman", "Insomnia", "REST Assured", "Newman", "Karate",
        ],
    },
}


def compatible_values(backend_framework: Optional[str], key: FieldKey) -> Optional[List[str]]:
    """
    Values of ``key`` known to work with ``backend_framework``.

    Returns None when the framework is blank, unknown, or does not narrow
    this group; callers then offer the full catalog.
    """
    if not backend_framework:
        return None
    compatibility = FRAMEWORK_COMPATIBILITY.get(backend_framework.strip())
    if compatibility is None:
        return None
    return compatibility.get(key)


def _narrow(values: List[str], compatible: Optional[List[str]]) -> List[str]:
    if compatible is None:
        return list(values)
    return [value for value in values if value in compatible]


def filtered_options(backend_framework: Optional[str] = None) -> Dict[str, Dict[str, List[str]]]:
    """
    Builds the catalog for every field group, narrowed for a backend framework.

    The compatibility list applies to the group's single-pick choices, or to
    its multi-select options when the group has no choices (caching).

    Example:
        >>> filtered_options("FastAPI")["testing_framework"]["choices"]
        ['Pytest', 'Jest', 'Vitest']
    """
    catalogs: Dict[str, Dict[str, List[str]]] = {}
    for key in FieldKey:
        compatible = compatible_values(backend_framework, key)
        choices = FIELD_CHOICES.get(key, [])
        options = FIELD_OPTIONS.get(key, [])
        if choices:
            choices = _narrow(choices, compatible)
            options = list(options)
        else:
            options = _narrow(options, compatible)
        catalogs[key.value] = {"choices": choices, "options": options}
    return catalogs

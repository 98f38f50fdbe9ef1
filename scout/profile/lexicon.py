"""Vocabulary used by the profile scorers and the response analyzer.

Terms are matched case-insensitively as whole words (see ``find_terms``).
"""

import re

from scout.profile.enums import Industry, UserRole

INDUSTRY_KEYWORDS: dict[Industry, tuple[str, ...]] = {
    Industry.FINTECH: (
        "payment", "payments", "finance", "banking", "fintech", "cryptocurrency",
        "blockchain", "lending", "investment", "trading", "wallet", "transaction",
        "compliance", "kyc", "aml", "pci dss", "soc2", "fraud", "credit", "debit",
        "mortgage", "insurance", "wealth management", "robo-advisor", "neobank", "regtech",
    ),
    Industry.HEALTHCARE: (
        "healthcare", "medical", "hospital", "clinic", "patient", "patients", "doctor",
        "physician", "nurse", "health", "medicine", "pharmaceutical", "biotech", "ehr",
        "emr", "hipaa", "clinical", "diagnosis", "treatment", "therapy", "telehealth",
        "telemedicine", "medical device", "fda", "clinical trial",
    ),
    Industry.ECOMMERCE: (
        "ecommerce", "e-commerce", "online store", "marketplace", "retail", "shopping",
        "cart", "checkout", "inventory", "fulfillment", "shipping", "product catalog",
        "dropshipping", "consumer goods", "merchant", "shopify", "amazon",
        "online retail",
    ),
    Industry.SAAS: (
        "saas", "software as a service", "b2b software", "cloud software", "subscription",
        "api", "platform", "dashboard", "analytics", "crm", "productivity",
        "collaboration", "workflow", "automation", "integration", "enterprise software",
        "business software",
    ),
    Industry.CONSUMER: (
        "consumer app", "mobile app", "social", "entertainment", "gaming", "lifestyle",
        "travel", "food", "fitness", "dating", "social media", "streaming",
        "user engagement", "viral",
    ),
    Industry.ENTERPRISE: (
        "enterprise", "b2b", "corporate", "organization", "internal tool", "employee",
        "employees", "hr", "operations", "governance", "compliance", "security",
        "infrastructure",
    ),
    Industry.GENERAL: (
        "business", "startup", "idea", "product", "service", "market", "customer",
        "customers", "solution", "problem", "opportunity",
    ),
}

ADVANCED_TERMINOLOGY: dict[Industry, tuple[str, ...]] = {
    Industry.FINTECH: (
        "algorithmic trading", "quantitative analysis", "risk modeling", "derivatives",
        "compliance framework", "regulatory sandbox", "capital adequacy", "stress testing",
        "market microstructure", "high-frequency trading", "liquidity provision",
        "credit scoring models", "alternative data", "regulatory technology",
        "payment orchestration", "ledger reconciliation",
    ),
    Industry.HEALTHCARE: (
        "clinical decision support", "evidence-based medicine", "pharmacovigilance",
        "clinical trial design", "biomarker validation", "health economics",
        "population health", "precision medicine", "genomics", "clinical informatics",
        "interoperability standards", "value-based care", "real-world evidence", "fhir",
        "hl7",
    ),
    Industry.ECOMMERCE: (
        "conversion rate optimization", "customer lifetime value", "attribution modeling",
        "inventory optimization", "demand forecasting", "recommendation engines",
        "personalization algorithms", "omnichannel strategy", "fulfillment automation",
        "dynamic pricing", "marketplace mechanics", "fraud detection",
        "supply chain visibility", "customer data platform",
    ),
    Industry.SAAS: (
        "multi-tenancy", "horizontal scaling", "api rate limiting", "webhook architecture",
        "event-driven architecture", "cqrs", "distributed systems", "microservices",
        "container orchestration", "service mesh", "observability", "chaos engineering",
        "progressive deployment", "feature flags",
    ),
    Industry.CONSUMER: (
        "user engagement metrics", "retention modeling", "viral mechanics", "growth hacking",
        "network effects", "user acquisition funnel", "cohort analysis",
        "behavioral analytics", "app store optimization", "social graph analysis",
        "content recommendation", "gamification",
    ),
    Industry.ENTERPRISE: (
        "enterprise architecture", "digital transformation", "change management",
        "business process reengineering", "governance framework", "compliance automation",
        "identity management", "zero trust security", "data governance",
        "master data management", "business intelligence", "workflow orchestration",
    ),
    Industry.GENERAL: (
        "stakeholder management", "value proposition", "competitive analysis",
        "market segmentation", "customer validation", "business model canvas",
        "lean startup", "design thinking", "product-market fit", "data-driven decisions",
    ),
}

PROFESSIONAL_TERMINOLOGY: dict[UserRole, tuple[str, ...]] = {
    UserRole.TECHNICAL: (
        "software architecture", "design patterns", "code review", "technical debt",
        "performance optimization", "scalability", "fault tolerance",
        "continuous integration", "infrastructure as code", "monitoring and alerting",
        "security best practices", "technical documentation", "architecture",
    ),
    UserRole.BUSINESS: (
        "strategic planning", "market analysis", "business development",
        "stakeholder engagement", "financial modeling", "revenue optimization",
        "cost-benefit analysis", "risk assessment", "project management",
        "performance metrics", "competitive intelligence", "partnership strategy",
        "go-to-market",
    ),
    UserRole.HYBRID: (
        "product strategy", "technical requirements", "cross-functional collaboration",
        "user research", "product roadmap", "feature prioritization", "data analytics",
        "technical feasibility", "market requirements", "agile methodology",
        "stakeholder alignment", "product metrics",
    ),
}

COMPLIANCE_TERMS: tuple[str, ...] = (
    "soc2", "soc 2", "hipaa", "pci dss", "gdpr", "kyc", "aml", "iso 27001", "fedramp",
)

TECHNICAL_KEYWORDS: tuple[str, ...] = (
    "api", "apis", "sdk", "framework", "library", "database", "server", "cloud",
    "microservices", "devops", "ci/cd", "containerization", "kubernetes", "react",
    "node.js", "python", "javascript", "typescript", "sql", "rest", "graphql",
    "authentication", "authorization", "encryption", "real-time", "scalability",
    "latency", "throughput", "caching", "load balancing", "sharding", "replication",
    "monitoring", "logging", "debugging", "unit tests", "integration tests", "aws",
    "azure", "gcp", "docker", "git", "github", "terraform", "redis", "postgresql",
    "mongodb", "elasticsearch", "kafka", "rabbitmq", "nginx", "oauth", "jwt",
    "websocket", "websockets", "webhook", "webhooks", "backend", "frontend",
    "vulnerability", "zero trust", "key management",
)

TECHNICAL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b\w+\.(js|ts|py|java|rb|go|rs)\b", re.IGNORECASE),
    re.compile(r"\bv\d+\.\d+(\.\d+)?\b", re.IGNORECASE),
    re.compile(r"\b(HTTP|HTTPS|SSH|TCP|UDP)\b"),
    re.compile(r"\b(GET|POST|PUT|DELETE|PATCH)\s+/", re.IGNORECASE),
)

TECHNICAL_PHRASES: tuple[str, ...] = (
    "technical implementation", "code review", "pull request", "tech stack",
    "system architecture", "data model", "performance tuning", "technical debt",
    "refactoring", "deployment pipeline", "infrastructure as code",
)

BUSINESS_KEYWORDS: tuple[str, ...] = (
    "revenue", "profit", "roi", "kpi", "kpis", "metrics", "market share",
    "competitive advantage", "value proposition", "business model", "monetization",
    "pricing", "customer acquisition", "retention", "churn", "ltv", "cac",
    "stakeholders", "executives", "board", "investors", "funding", "series a",
    "venture capital", "acquisition", "partnership", "hiring", "go-to-market",
    "marketing", "brand", "positioning", "target audience", "customer segments",
    "personas", "funnel", "conversion rate", "lead generation", "sales", "b2b", "b2c",
    "budget", "forecast", "p&l", "cash flow", "burn rate", "runway", "valuation",
    "compliance", "regulation", "contract",
)

BUSINESS_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\$[\d,]+(\.\d{2})?[kmb]?", re.IGNORECASE),
    re.compile(r"\b\d+%"),
    re.compile(r"\bQ[1-4]\s+\d{4}\b", re.IGNORECASE),
    re.compile(r"\b(YoY|MoM|QoQ)\b", re.IGNORECASE),
)

BUSINESS_PHRASES: tuple[str, ...] = (
    "business plan", "market research", "competitive analysis", "customer validation",
    "product-market fit", "business requirements", "success metrics", "growth strategy",
    "operational efficiency", "cost optimization", "risk management", "strategic planning",
)

HYBRID_KEYWORDS: tuple[str, ...] = (
    "roadmap", "backlog", "sprint", "agile", "scrum", "user story", "acceptance criteria",
    "mvp", "prototype", "ux", "wireframe", "mockup", "api integration", "data analytics",
    "business intelligence", "process optimization", "digital transformation",
    "data-driven", "requirements", "specifications", "cross-functional",
    "stakeholder alignment", "feasibility",
)

HYBRID_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\b(PM|TPM|PMM)\b"),
    re.compile(r"\bA/B\s+test", re.IGNORECASE),
)

HYBRID_PHRASES: tuple[str, ...] = (
    "product requirements", "technical feasibility", "user research", "data analysis",
    "business logic", "system requirements", "product strategy",
    "technical specifications", "implementation plan", "project scope",
)

# Abstract concept tiers and the score each occurrence contributes
ABSTRACT_CONCEPTS: tuple[tuple[tuple[str, ...], float], ...] = (
    (("framework", "methodology", "paradigm", "ecosystem", "architecture"), 0.25),
    (("strategy", "process", "system", "approach", "solution"), 0.15),
    (("idea", "plan", "way", "method", "tool"), 0.05),
)

# Self-identification as a beginner; lowers sophistication, not a confusion signal
NOVICE_MARKERS: tuple[str, ...] = (
    "don't know anything about", "do not know anything about", "not technical",
    "non-technical", "not a tech person", "new to this", "i'm new to", "beginner",
    "no experience", "no idea how", "never built",
)

HEDGE_MARKERS: tuple[str, ...] = (
    "maybe", "i guess", "kind of", "sort of", "perhaps", "probably", "i think",
)

CONNECTIVES: tuple[str, ...] = (
    "because", "so that", "therefore", "then", "first", "second", "also", "which",
    "however", "but", "while", "whereas",
)

ACTION_VERBS: tuple[str, ...] = (
    "need", "needs", "want", "build", "integrate", "support", "allow", "require",
    "requires", "launch", "automate", "track", "process", "connect",
)

ENTHUSIASM_MARKERS: tuple[str, ...] = (
    "excited", "love", "great", "awesome", "amazing", "can't wait", "fantastic",
    "perfect", "exactly",
)

PROACTIVE_MARKERS: tuple[str, ...] = (
    "we could", "what if", "i'd like to", "i would like to", "we should",
    "another idea", "also want", "one more thing",
)

COLLABORATIVE_MARKERS: tuple[str, ...] = (
    "let's", "together", "what do you think", "your thoughts", "we can", "how about",
    "does that make sense",
)

# Behavioral signal markers with the confidence each contributes
CONFUSION_MARKERS: dict[str, float] = {
    "not sure what you mean": 0.6,
    "what do you mean": 0.5,
    "don't understand": 0.6,
    "do not understand": 0.6,
    "confusing": 0.6,
    "confused": 0.6,
    "i'm lost": 0.6,
    "lost me": 0.6,
    "unclear": 0.4,
    "no idea what": 0.5,
    "not sure": 0.3,
    "huh": 0.3,
}

IMPATIENCE_MARKERS: dict[str, float] = {
    "get on with it": 0.7,
    "too many questions": 0.7,
    "just get to": 0.6,
    "let's move on": 0.6,
    "hurry": 0.6,
    "asap": 0.6,
    "urgent": 0.6,
    "no time": 0.6,
    "quickly": 0.4,
    "faster": 0.4,
    "right now": 0.4,
    "come on": 0.4,
    "deadline": 0.3,
}

EXPERT_SKIP_MARKERS: dict[str, float] = {
    "skip the basics": 0.7,
    "already know this": 0.7,
    "already know": 0.6,
    "i know this": 0.6,
    "i'm an expert": 0.5,
    "i've done this before": 0.5,
    "skip": 0.35,
    "i've built": 0.3,
    "i have built": 0.3,
    "years of experience": 0.3,
    "already": 0.15,
}

ESCAPE_HATCH_MARKERS: dict[str, float] = {
    "just make assumptions": 0.8,
    "make assumptions": 0.6,
    "just generate": 0.7,
    "fill in the rest": 0.6,
    "use your best judgment": 0.6,
    "skip ahead": 0.6,
    "just show me": 0.5,
    "assume": 0.4,
    "assumptions": 0.4,
    "move forward": 0.4,
    "wireframe": 0.3,
    "wireframes": 0.3,
}

ALL_TECHNICAL_TERMS: tuple[str, ...] = tuple(
    dict.fromkeys(TECHNICAL_KEYWORDS + TECHNICAL_PHRASES + COMPLIANCE_TERMS)
)

ALL_INDUSTRY_KEYWORDS: tuple[str, ...] = tuple(
    dict.fromkeys(
        term
        for industry, terms in INDUSTRY_KEYWORDS.items()
        if industry is not Industry.GENERAL
        for term in terms
    )
)

ALL_ADVANCED_TERMINOLOGY: tuple[str, ...] = tuple(
    dict.fromkeys(term for terms in ADVANCED_TERMINOLOGY.values() for term in terms)
)

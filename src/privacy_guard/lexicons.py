"""Built-in taxonomy for English-language terms of service and privacy policies.

The structure matches what :meth:`Taxonomy.from_dict` accepts, so a JSON
file with the same shape can replace or extend it.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Legacy red flags: ordered keyword attempts per flag
# ---------------------------------------------------------------------------

RED_FLAGS: dict[str, dict] = {
    "data_selling": {
        "severity": "critical",
        "bullet": "May sell your data to third parties",
        "keywords": [
            "sell your personal",
            "sell your data",
            "sell your information",
            "sale of personal information",
            "sale of your",
            "sold to third parties",
        ],
    },
    "biometric_data": {
        "severity": "critical",
        "bullet": "Collects biometric data (facial recognition, fingerprints)",
        "keywords": ["biometric", "facial recognition", "fingerprint", "face scan", "voiceprint"],
    },
    "no_deletion": {
        "severity": "critical",
        "bullet": "Limited or no right to delete your data",
        "keywords": [
            "retain copies",
            "residual copies",
            "backup copies",
            "after you delete",
            "after account deletion",
            "even after you close",
        ],
    },
    "arbitration": {
        "severity": "high",
        "bullet": "Disputes require private arbitration (no class action)",
        "keywords": [
            "binding arbitration",
            "mandatory arbitration",
            "class action waiver",
            "waive your right",
            "arbitration",
        ],
    },
    "data_sharing": {
        "severity": "high",
        "bullet": "Shares your data with third parties",
        "keywords": [
            "share your personal",
            "share your information",
            "share your data",
            "disclose your information",
            "share",
            "third parties",
        ],
    },
    "profile_building": {
        "severity": "high",
        "keywords": ["build a profile", "create a profile", "profiling", "inferences about you"],
    },
    "location_tracking": {
        "severity": "high",
        "bullet": "Tracks your location data",
        "keywords": [
            "precise location",
            "geolocation",
            "gps",
            "location data",
            "location information",
        ],
    },
    "ai_training": {
        "severity": "high",
        "bullet": "May use your data to train AI models",
        "keywords": [
            "train our models",
            "train our ai",
            "training data",
            "machine learning",
            "artificial intelligence",
        ],
    },
    "indefinite_retention": {
        "severity": "high",
        "keywords": ["indefinitely", "as long as necessary", "for as long as we deem"],
    },
    "auto_renewal": {
        "severity": "medium",
        "bullet": "Subscription auto-renews automatically",
        "keywords": ["automatically renew", "auto-renew", "automatic renewal", "recurring billing"],
    },
    "hidden_fees": {
        "severity": "medium",
        "keywords": ["additional fees", "processing fee", "service fee", "fees may apply"],
    },
    "tracking_cookies": {
        "severity": "medium",
        "bullet": "Uses tracking cookies and targeted advertising",
        "keywords": [
            "tracking cookies",
            "third-party cookies",
            "web beacons",
            "tracking pixels",
            "tracking technologies",
        ],
    },
    "targeted_advertising": {
        "severity": "medium",
        "bullet": "Uses tracking cookies and targeted advertising",
        "keywords": [
            "targeted advertising",
            "interest-based advertising",
            "personalized ads",
            "behavioral advertising",
        ],
    },
    "data_transfer": {
        "severity": "medium",
        "keywords": [
            "international transfer",
            "transferred to",
            "outside your country",
            "cross-border",
        ],
    },
    "vague_partners": {
        "severity": "medium",
        "keywords": ["trusted partners", "selected partners", "our partners", "business partners"],
    },
    "no_refunds": {
        "severity": "low",
        "bullet": "Refunds appear limited or unavailable",
        "keywords": ["non-refundable", "all sales are final", "without refund"],
    },
}

# ---------------------------------------------------------------------------
# Legal patterns: document-wide regexes with a severity tier
# ---------------------------------------------------------------------------

LEGAL_PATTERNS: dict[str, dict] = {
    "unilateral_changes": {
        "severity": "high",
        "description": "Can change terms anytime without notice",
        "matchers": [
            {
                "regex": r"\b(?:may|can|reserve|right to)\s+(?:change|modify|update|alter|amend|revise)"
                r"\s+.{0,50}\s+(?:anytime|at any time|without notice|at our discretion|sole discretion)"
            },
        ],
    },
    "forced_arbitration": {
        "severity": "critical",
        "description": "Forces arbitration, waives right to sue or join class action",
        "matchers": [
            {
                "regex": r"\b(?:binding arbitration|mandatory arbitration|agree to arbitrate"
                r"|waive.{0,30}(?:class action|jury trial)|arbitration agreement)"
            },
        ],
    },
    "broad_ip_license": {
        "severity": "high",
        "description": "Grants extremely broad rights to your content",
        "matchers": [
            {
                "regex": r"\b(?:perpetual|irrevocable|worldwide|royalty-free|transferable).{0,50}"
                r"(?:license|right).{0,50}(?:content|data|intellectual property|user content)"
            },
        ],
    },
    "liability_waiver": {
        "severity": "medium",
        "description": "Disclaims responsibility for problems or damages",
        "matchers": [
            {
                "regex": r"\b(?:not (?:responsible|liable)|no (?:liability|warranty)"
                r"|use at your own risk|as is|without warranty)"
            },
        ],
    },
    "data_monetization": {
        "severity": "critical",
        "description": "May sell your data (using technical language)",
        "matchers": [
            {
                "regex": r"\b(?:monetiz\w*|valuable consideration|compensation|revenue).{0,50}"
                r"(?:data|information)"
            },
            {
                "regex": r"\b(?:data|information)\b.{0,80}"
                r"(?:valuable consideration|monetiz\w*|in exchange for (?:money|payment|compensation))"
            },
        ],
    },
    "indefinite_retention": {
        "severity": "high",
        "description": "Keeps your data indefinitely or for vague reasons",
        "matchers": [
            {
                "regex": r"\b(?:retain|store|keep).{0,50}(?:indefinitely|as long as necessary"
                r"|for our business purposes|until you request deletion)"
            },
        ],
    },
    "automatic_consent": {
        "severity": "medium",
        "description": "Using the service means automatic agreement to terms",
        "matchers": [
            {
                "regex": r"\b(?:by (?:using|accessing|continuing)|continued use).{0,50}"
                r"(?:agree|accept|consent|bound by)"
            },
        ],
    },
    "vague_sharing": {
        "severity": "high",
        "description": 'Shares data with vaguely defined "partners"',
        "matchers": [
            {
                "regex": r"\b(?:share|disclose|provide|transfer).{0,50}(?:trusted partners"
                r"|selected partners|third-party partners|affiliates|service providers)"
            },
        ],
    },
}

# ---------------------------------------------------------------------------
# Contradiction pairs: a claim and the statement that undercuts it
# ---------------------------------------------------------------------------

CONTRADICTIONS: dict[str, dict] = {
    "no_sale_claim": {
        "description": "Claims not to sell data but also mentions selling/sharing data",
        "claim": {"regex": r"\bwe (?:do not|don't|never) (?:sell|share|disclose).{0,30}(?:data|information)"},
        "contradiction": {
            "regex": r"\bwe (?:may|can|will) (?:sell|share|disclose|transfer|provide).{0,30}"
            r"(?:data|information)"
        },
    },
    "privacy_claim": {
        "description": "Claims data is private but shares with third parties",
        "claim": {"regex": r"\byour data is (?:private|secure|protected|confidential)"},
        "contradiction": {
            "regex": r"\b(?:share|disclose|provide).{0,50}(?:third parties|partners|affiliates)"
        },
    },
    "ownership_claim": {
        "description": "Claims you control your data but takes broad license",
        "claim": {"regex": r"\byou (?:control|own) your (?:data|information|content)"},
        "contradiction": {"regex": r"\b(?:perpetual|irrevocable|unlimited|worldwide).{0,50}license"},
    },
}

# ---------------------------------------------------------------------------
# Lexicons
# ---------------------------------------------------------------------------

NEGATION_CUES: list[str] = [
    "not", "no", "never", "neither", "nor", "nobody", "nothing", "nowhere", "none",
    "won't", "wouldn't", "shouldn't", "couldn't", "can't", "cannot",
    "don't", "doesn't", "didn't", "isn't", "aren't", "wasn't", "weren't",
    "haven't", "hasn't", "hadn't",
]

HIGH_RISK_DATA: list[str] = [
    "biometric", "fingerprint", "facial recognition", "voice print",
    "financial information", "bank account", "credit card", "ssn", "social security",
    "health data", "medical", "genetic", "dna",
    "precise location", "geolocation", "gps",
    "children", "child", "minor",
]

MEDIUM_RISK_DATA: list[str] = [
    "email", "phone number", "address", "contact information",
    "browsing history", "search history", "device information",
    "ip address", "cookies", "identifiers",
]

LOW_RISK_DATA: list[str] = ["username", "profile picture", "preferences", "settings"]

THIRD_PARTIES: list[str] = [
    "advertiser", "advertising", "marketing partner", "analytics provider",
    "data broker", "affiliate", "service provider", "business partner",
    "government", "law enforcement", "legal authority",
]

PURPOSES: list[str] = [
    "advertising", "marketing", "targeting", "profiling",
    "analytics", "research", "improvement",
    "selling", "monetization", "revenue",
    "compliance", "legal", "enforcement",
]

# Offshore jurisdictions are listed deliberately.
JURISDICTIONS: list[str] = [
    "california", "european union", "eu", "gdpr", "ccpa",
    "united states", "us", "uk", "china", "russia",
    "cayman islands", "british virgin islands",
]

VAGUE_TERMS: dict[str, list[str]] = {
    "qualifiers": [
        "reasonable", "appropriate", "necessary", "sufficient",
        "adequate", "substantial", "significant",
    ],
    "hedging": [
        "may", "might", "could", "possibly", "potentially",
        "from time to time", "as needed", "as appropriate",
    ],
    "undefined": [
        "etc", "and so on", "and more", "including but not limited to",
        "such as", "and others",
    ],
}

LEGAL_JARGON: list[str] = [
    "heretofore", "hereinafter", "aforementioned", "pursuant to",
    "notwithstanding", "whereby", "thereof", "therein", "hereunder",
    "aforesaid", "forthwith", "wherein",
]

PRIVACY_PROTECTIONS: list[str] = ["gdpr", "ccpa", "privacy rights"]

DEFAULT_TAXONOMY: dict = {
    "red_flags": RED_FLAGS,
    "legal_patterns": LEGAL_PATTERNS,
    "contradictions": CONTRADICTIONS,
    "lexicons": {
        "negation": NEGATION_CUES,
        "data_types": {
            "high_risk": HIGH_RISK_DATA,
            "medium_risk": MEDIUM_RISK_DATA,
            "low_risk": LOW_RISK_DATA,
        },
        "third_parties": THIRD_PARTIES,
        "purposes": PURPOSES,
        "jurisdictions": JURISDICTIONS,
        "vague": VAGUE_TERMS,
        "legal_jargon": LEGAL_JARGON,
        "privacy_protections": PRIVACY_PROTECTIONS,
    },
}

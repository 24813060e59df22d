"""
Filter vocabulary shared by search, Optimise and the onboarding wizard.

Static lookup tables only. Labels that are not in a table mean "no constraint";
callers never get an error for an unknown label.
"""
from __future__ import annotations

from typing import Dict, List, Optional

JOB_TYPES = ("full_time", "part_time", "freelance", "contract", "internship")
REMOTE_SCOPES = ("worldwide", "europe", "north_america", "latam", "asia")
SORT_MODES = ("date", "relevance")
ALERT_FREQUENCIES = ("daily", "weekly")
USER_ROLES = ("user", "employer")

OTHER_NOT_LISTED = "Other / Not Listed"

# Onboarding question ids (stable, stored as keys of answersByQuestionId)
Q_CATEGORY = 0
Q_ROLE = 1
Q_SKILLS = 2
Q_TIMEZONES = 3
Q_COMPANY_TYPE = 4
Q_SALARY = 5
Q_WORK_LOCATION = 6
Q_JOB_TYPE = 7
Q_NOTES = 8

CATEGORY_CHIPS: List[Dict[str, str]] = [
    {"label": "Software Development", "slug": "software-development"},
    {"label": "Customer Service", "slug": "customer-support"},
    {"label": "Design", "slug": "design"},
    {"label": "Marketing", "slug": "marketing"},
    {"label": "Sales / Business", "slug": "sales"},
    {"label": "Product", "slug": "product"},
    {"label": "Project Management", "slug": "project"},
    {"label": "AI / ML", "slug": "ai-ml"},
    {"label": "Data Analysis", "slug": "data-analysis"},
    {"label": "Devops / Sysadmin", "slug": "devops"},
    {"label": "Finance", "slug": "finance"},
    {"label": "Human Resources", "slug": "human-resources"},
    {"label": "QA", "slug": "qa"},
    {"label": "Writing", "slug": "writing"},
    {"label": "Legal", "slug": "legal"},
    {"label": "Medical", "slug": "medical"},
    {"label": "Education", "slug": "education"},
    {"label": "All Others", "slug": "all-others"},
]

CATEGORY_BY_LABEL: Dict[str, str] = {c["label"]: c["slug"] for c in CATEGORY_CHIPS}

JOB_TYPE_BY_LABEL: Dict[str, str] = {
    "Full-time": "full_time",
    "Part-time": "part_time",
    "Freelance": "freelance",
    "Contract": "contract",
    "Internship": "internship",
}

REMOTE_SCOPE_BY_LABEL: Dict[str, str] = {
    "US Only": "north_america",
    "Americas (UTC-8 to UTC-3)": "north_america",
    "Latin America (UTC-6 to UTC-3)": "latam",
    "Europe (UTC+0 to UTC+3)": "europe",
    "Asia-Pacific (UTC+5 to UTC+10)": "asia",
    "Global/Any": "worldwide",
}

SALARY_FLOOR_BY_BAND: Dict[str, int] = {
    "$50k–$70k": 50000,
    "$70k–$90k": 70000,
    "$90k–$110k": 90000,
    "$110k–$130k": 110000,
    "$130k–$150k": 130000,
    "$150k+": 150000,
}

SALARY_SENTINELS = ("Flexible / Open", "Prefer not to say")


def _normalise_label(label: str) -> str:
    text = (label or "").strip().casefold()
    # Hyphen and em dash typed by hand stand in for the en dash in band labels
    return text.replace("—", "–").replace("k-$", "k–$")


def lookup(table: Dict, label: Optional[str]):
    """Case-insensitive table lookup. Returns None for anything unmapped."""
    if not label:
        return None
    if label in table:
        return table[label]
    wanted = _normalise_label(label)
    for key, value in table.items():
        if _normalise_label(key) == wanted:
            return value
    return None


_GENERIC_ROLES = [
    "Senior Role",
    "Mid-Level Role",
    "Entry-Level Role",
    "Lead Role",
    OTHER_NOT_LISTED,
]

_CATEGORY_OPTIONS: Dict[str, Dict[int, List[str]]] = {
    "software-development": {
        Q_SKILLS: [
            "React",
            "TypeScript",
            "Node.js",
            "Python",
            "Java",
            "Go",
            "Rust",
            "Full-Stack Development",
            "Frontend Development",
            "Backend Development",
            "Mobile Development",
            "DevOps",
            OTHER_NOT_LISTED,
        ],
        Q_ROLE: [
            "Senior Software Engineer",
            "Full-Stack Developer",
            "Frontend Developer",
            "Backend Developer",
            "Mobile Developer",
            "DevOps Engineer",
            "Technical Lead",
            OTHER_NOT_LISTED,
        ],
    },
    "design": {
        Q_SKILLS: [
            "UI/UX Design",
            "Product Design",
            "Visual Design",
            "User Research",
            "Design Systems",
            "Figma",
            "Prototyping",
            "Design Strategy",
            OTHER_NOT_LISTED,
        ],
        Q_ROLE: [
            "Product Designer",
            "UI Designer",
            "UX Designer",
            "Design Lead",
            "Visual Designer",
            "User Researcher",
            "Design Systems Designer",
            OTHER_NOT_LISTED,
        ],
    },
    "marketing": {
        Q_SKILLS: [
            "Content Marketing",
            "SEO/SEM",
            "Social Media Marketing",
            "Email Marketing",
            "Growth Marketing",
            "Product Marketing",
            "Brand Marketing",
            "Marketing Analytics",
            OTHER_NOT_LISTED,
        ],
        Q_ROLE: [
            "Marketing Manager",
            "Content Marketing Manager",
            "Growth Marketing Manager",
            "Product Marketing Manager",
            "SEO Specialist",
            "Marketing Analyst",
            "Marketing Lead",
            OTHER_NOT_LISTED,
        ],
    },
    "product": {
        Q_SKILLS: [
            "Product Strategy",
            "Product Analytics",
            "User Research",
            "Roadmap Planning",
            "Stakeholder Management",
            "A/B Testing",
            "Feature Discovery",
            "Product Metrics",
            OTHER_NOT_LISTED,
        ],
        Q_ROLE: [
            "Product Manager",
            "Senior Product Manager",
            "Product Lead",
            "Associate Product Manager",
            "Product Owner",
            "Technical Product Manager",
            OTHER_NOT_LISTED,
        ],
    },
    "sales": {
        Q_SKILLS: [
            "B2B Sales",
            "B2C Sales",
            "Account Management",
            "Sales Development",
            "Sales Operations",
            "CRM Management",
            "Negotiation",
            "Lead Generation",
            OTHER_NOT_LISTED,
        ],
        Q_ROLE: [
            "Sales Manager",
            "Account Executive",
            "Sales Development Representative",
            "Business Development Manager",
            "Sales Operations Manager",
            "Account Manager",
            "Sales Lead",
            OTHER_NOT_LISTED,
        ],
    },
    "customer-support": {
        Q_SKILLS: [
            "Customer Service",
            "Technical Support",
            "Customer Success",
            "Support Operations",
            "Customer Experience",
            "Help Desk",
            "Client Relations",
            "Customer Advocacy",
            OTHER_NOT_LISTED,
        ],
        Q_ROLE: [
            "Customer Support Manager",
            "Customer Success Manager",
            "Technical Support Engineer",
            "Support Specialist",
            "Customer Experience Manager",
            OTHER_NOT_LISTED,
        ],
    },
}


def get_join_questions(selected_category: Optional[str] = None) -> List[Dict]:
    """
    Return the onboarding questions. Role and skill options depend on the chosen
    category label; unknown or missing categories get the generic lists.
    """
    slug = lookup(CATEGORY_BY_LABEL, selected_category) or ""
    specific = _CATEGORY_OPTIONS.get(slug, {})

    return [
        {
            "id": Q_CATEGORY,
            "label": "What category are you most interested in?",
            "options": [c["label"] for c in CATEGORY_CHIPS],
        },
        {
            "id": Q_ROLE,
            "label": "What kind of remote role are you looking for?",
            "options": specific.get(Q_ROLE, _GENERIC_ROLES),
            "categoryBased": True,
        },
        {
            "id": Q_SKILLS,
            "label": "What are your top 3 skills?",
            "options": specific.get(
                Q_SKILLS,
                ["General Skills", "Technical Skills", "Soft Skills", OTHER_NOT_LISTED],
            ),
            "categoryBased": True,
        },
        {
            "id": Q_TIMEZONES,
            "label": "Which time zones can you comfortably work in?",
            "options": list(REMOTE_SCOPE_BY_LABEL) + [OTHER_NOT_LISTED],
        },
        {
            "id": Q_COMPANY_TYPE,
            "label": "What type of companies are you most interested in?",
            "options": [
                "Early-stage startups",
                "Growth-stage companies",
                "Enterprise/Big Tech",
                "Nonprofit",
                "Fintech",
                "Consumer marketplaces",
                "SaaS Companies",
                OTHER_NOT_LISTED,
            ],
        },
        {
            "id": Q_SALARY,
            "label": "What is your target salary range (in USD)?",
            "options": list(SALARY_FLOOR_BY_BAND) + list(SALARY_SENTINELS),
        },
        {
            "id": Q_WORK_LOCATION,
            "label": "Where are you legally allowed to work from?",
            "options": ["US", "Canada", "EU", "UK", "APAC", "Remote contractor worldwide", OTHER_NOT_LISTED],
        },
        {
            "id": Q_JOB_TYPE,
            "label": "What type of employment are you looking for?",
            "options": list(JOB_TYPE_BY_LABEL),
        },
        {
            "id": Q_NOTES,
            "label": "Anything else we should know?",
            "options": [],
        },
    ]


__all__ = [
    "JOB_TYPES",
    "REMOTE_SCOPES",
    "SORT_MODES",
    "ALERT_FREQUENCIES",
    "USER_ROLES",
    "OTHER_NOT_LISTED",
    "CATEGORY_CHIPS",
    "CATEGORY_BY_LABEL",
    "JOB_TYPE_BY_LABEL",
    "REMOTE_SCOPE_BY_LABEL",
    "SALARY_FLOOR_BY_BAND",
    "SALARY_SENTINELS",
    "lookup",
    "get_join_questions",
]

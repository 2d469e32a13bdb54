"""Static keyword tables used by the keyword analyzer.

Table order is significant: skills are reported in the order they appear
here, which keeps analysis deterministic for a given text.
"""

from __future__ import annotations

import re
from functools import lru_cache

# Canonical skill name -> keyword aliases (matched case-insensitively on word boundaries)
SKILL_KEYWORDS: dict[str, tuple[str, ...]] = {
    "JavaScript": ("javascript", "js", "node.js", "nodejs", "node"),
    "React": ("react", "reactjs", "react.js"),
    "Python": ("python", "django", "flask", "fastapi"),
    "Java": ("java", "spring", "springboot", "spring boot"),
    "SQL": ("sql", "mysql", "postgresql", "postgres", "database", "databases"),
    "AWS": ("aws", "amazon web services", "cloud"),
    "Docker": ("docker", "containerization", "containers"),
    "Git": ("git", "github", "gitlab", "version control"),
    "TypeScript": ("typescript",),
    "Angular": ("angular", "angularjs"),
    "Vue.js": ("vue", "vue.js", "vuejs"),
    "HTML/CSS": ("html", "html5", "css", "css3", "sass", "tailwind"),
    "Go": ("golang",),
    "C#": ("c#", ".net", "dotnet", "asp.net"),
    "C++": ("c++",),
    "Kubernetes": ("kubernetes", "k8s"),
    "Terraform": ("terraform", "infrastructure as code"),
    "Linux": ("linux", "unix", "bash"),
    "MongoDB": ("mongodb", "mongo", "nosql"),
    "Redis": ("redis",),
    "GraphQL": ("graphql",),
    "REST APIs": ("restful", "rest api", "rest apis"),
    "CI/CD": ("ci/cd", "continuous integration", "jenkins", "github actions"),
    "Machine Learning": ("machine learning", "ml", "tensorflow", "pytorch", "scikit-learn"),
    "Data Analysis": ("data analysis", "pandas", "analytics", "tableau", "power bi"),
    "Agile": ("agile", "scrum", "kanban"),
}

SENIOR_MARKERS: tuple[str, ...] = ("senior", "sr", "lead", "principal", "staff")
ENTRY_MARKERS: tuple[str, ...] = (
    "junior",
    "jr",
    "entry",
    "entry-level",
    "fresher",
    "graduate",
    "intern",
    "internship",
)

# Industry name -> indicative keywords; ties resolve in table order
INDUSTRY_KEYWORDS: dict[str, tuple[str, ...]] = {
    "finance": ("finance", "fintech", "banking", "bank", "trading", "insurance", "payments"),
    "healthcare": ("healthcare", "health", "medical", "clinical", "hospital", "pharma"),
    "education": ("education", "edtech", "university", "school", "e-learning"),
    "e-commerce": ("e-commerce", "ecommerce", "retail", "marketplace", "shopping"),
    "media": ("media", "entertainment", "streaming", "gaming", "publishing"),
    "government": ("government", "public sector", "civic"),
    "telecommunications": ("telecom", "telecommunications", "network operator"),
}

DEFAULT_RESPONSIBILITIES: tuple[str, ...] = (
    "Develop software solutions",
    "Collaborate with team",
)
DEFAULT_QUALIFICATIONS: tuple[str, ...] = (
    "Bachelor's degree",
    "Relevant experience",
)

RESPONSIBILITY_HEADINGS = re.compile(
    r"^(key\s+)?(responsibilities|responsibility|duties|"
    r"what\s+you['’]?ll\s+do|what\s+you\s+will\s+do|your\s+role|the\s+role|"
    r"role\s+overview|day\s+to\s+day)\b",
    re.IGNORECASE,
)
QUALIFICATION_HEADINGS = re.compile(
    r"^(requirements|qualifications|minimum\s+qualifications|"
    r"what\s+you['’]?ll\s+need|what\s+we['’]?re\s+looking\s+for|who\s+you\s+are|"
    r"must\s+haves?|you\s+have|skills\s+(and|&)\s+experience)\b",
    re.IGNORECASE,
)


@lru_cache(maxsize=512)
def keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Compile a whole-word, case-insensitive pattern for a keyword.

    Word boundaries are expressed with look-arounds so keywords that
    start or end with punctuation ("c++", ".net") still match.
    """
    return re.compile(rf"(?<![\w]){re.escape(keyword)}(?![\w+#])", re.IGNORECASE)


def contains_keyword(text: str, keyword: str) -> bool:
    """Return True if ``keyword`` appears in ``text`` as a whole word."""
    return keyword_pattern(keyword).search(text) is not None

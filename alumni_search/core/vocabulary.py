"""Closed vocabularies that drive normalization and intent extraction.

Every table can be overridden from the ``vocabulary`` section of the
settings YAML. Keys are matched against the normalized query as whole
words; values are the extra variants searched for when a key is hit.
"""

import re

from pydantic import BaseModel, Field, model_validator

_WORD = re.compile(r"^[^\W_](?:[^\W_]|[&+#-])*$")

DEFAULT_CORRECTIONS: dict[str, str] = {
    # professions
    "developper": "developer",
    "develper": "developer",
    "devloper": "developer",
    "developr": "developer",
    "enginer": "engineer",
    "engeneer": "engineer",
    "lawer": "lawyer",
    "laywer": "lawyer",
    "advocat": "advocate",
    "enterprenuer": "entrepreneur",
    "enterprener": "entrepreneur",
    "entreprenuer": "entrepreneur",
    "maneger": "manager",
    "managr": "manager",
    "consulant": "consultant",
    "analist": "analyst",
    "desiner": "designer",
    "markting": "marketing",
    # domains
    "leagal": "legal",
    "ligal": "legal",
    "tecnology": "technology",
    "techonology": "technology",
    "finence": "finance",
    "finnance": "finance",
    "helthcare": "healthcare",
    "healtcare": "healthcare",
    # cities
    "bengaluru": "bangalore",
    "bengalore": "bangalore",
    "banglore": "bangalore",
    "blr": "bangalore",
    "mumbi": "mumbai",
    "bombay": "mumbai",
    "dilli": "delhi",
    "kolkatta": "kolkata",
    "calcutta": "kolkata",
    "puna": "pune",
    "poona": "pune",
    "hyderbad": "hyderabad",
    "hydrabad": "hyderabad",
    "hyd": "hyderabad",
    "ahmdabad": "ahmedabad",
    "ahemdabad": "ahmedabad",
    "amdavad": "ahmedabad",
    "madras": "chennai",
    "gurugram": "gurgaon",
    "trivandrum": "thiruvananthapuram",
    "cochin": "kochi",
}

DEFAULT_LOCATIONS: dict[str, list[str]] = {
    "pune": ["pimpri", "chinchwad"],
    "mumbai": ["bombay", "navi mumbai", "thane"],
    "navi mumbai": [],
    "bangalore": ["bengaluru"],
    "delhi": ["new delhi", "ncr"],
    "new delhi": ["delhi", "ncr"],
    "ncr": ["delhi", "gurgaon", "noida"],
    "gurgaon": ["gurugram"],
    "noida": [],
    "chennai": ["madras"],
    "kolkata": ["calcutta"],
    "hyderabad": ["secunderabad"],
    "ahmedabad": [],
    "surat": [],
    "jaipur": [],
    "lucknow": [],
    "kanpur": [],
    "nagpur": [],
    "nashik": [],
    "indore": [],
    "bhopal": [],
    "patna": [],
    "vadodara": ["baroda"],
    "chandigarh": [],
    "kochi": ["cochin"],
    "thiruvananthapuram": ["trivandrum"],
    "coimbatore": [],
    "mysore": ["mysuru"],
    "mangalore": ["mangaluru"],
    "goa": [],
    "guwahati": [],
    "ranchi": [],
    "varanasi": [],
    "visakhapatnam": ["vizag"],
    "aurangabad": [],
    "kolhapur": [],
    "maharashtra": [],
    "karnataka": [],
    "tamil nadu": [],
    "kerala": [],
    "gujarat": [],
    "rajasthan": [],
    "uttar pradesh": [],
    "bihar": [],
    "west bengal": [],
    "telangana": [],
    "andhra pradesh": [],
    "punjab": [],
    "haryana": [],
    "madhya pradesh": [],
    "india": [],
    "usa": ["united states"],
    "uk": ["united kingdom", "london"],
    "canada": [],
    "australia": [],
    "germany": [],
    "singapore": [],
    "dubai": ["uae"],
    "remote": [],
}

DEFAULT_INSTITUTIONS: dict[str, list[str]] = {
    "coep": ["college of engineering pune", "college of engineering, pune"],
    "iit": ["indian institute of technology"],
    "nit": ["national institute of technology"],
    "iiit": ["international institute of information technology"],
    "iim": ["indian institute of management"],
    "bits": ["birla institute"],
    "vit": ["vellore institute"],
    "mit": ["manipal institute", "maharashtra institute of technology",
            "massachusetts institute"],
    "manipal": [],
    "symbiosis": [],
    "pune university": ["savitribai phule"],
    "mumbai university": ["university of mumbai"],
    "delhi university": ["university of delhi"],
    "iisc": ["indian institute of science"],
    "jagriti yatra": [],
}

DEFAULT_COMPANIES: dict[str, list[str]] = {
    "google": [],
    "microsoft": [],
    "amazon": ["aws"],
    "meta": ["facebook"],
    "facebook": ["meta"],
    "apple": [],
    "netflix": [],
    "infosys": [],
    "tcs": ["tata consultancy"],
    "wipro": [],
    "hcl": [],
    "tech mahindra": [],
    "cognizant": [],
    "accenture": [],
    "deloitte": [],
    "pwc": ["pricewaterhouse"],
    "kpmg": [],
    "mckinsey": [],
    "flipkart": [],
    "paytm": [],
    "zomato": [],
    "swiggy": [],
    "ola": [],
    "uber": [],
    "byjus": ["byju"],
}

DEFAULT_ROLES: dict[str, list[str]] = {
    "developer": ["engineer", "programmer"],
    "engineer": ["developer"],
    "programmer": ["developer"],
    "designer": [],
    "manager": [],
    "director": [],
    "founder": ["co-founder", "entrepreneur"],
    "co-founder": ["founder"],
    "cofounder": ["co-founder", "founder"],
    "entrepreneur": ["founder", "business owner"],
    "ceo": ["chief executive"],
    "cto": ["chief technology"],
    "cfo": ["chief financial"],
    "consultant": [],
    "analyst": [],
    "architect": [],
    "researcher": [],
    "scientist": [],
    "freelancer": ["freelance"],
    "lawyer": ["advocate", "attorney", "legal counsel"],
    "advocate": ["lawyer"],
    "attorney": ["lawyer"],
    "doctor": ["physician"],
    "teacher": ["educator"],
    "professor": ["faculty"],
    "accountant": ["chartered accountant"],
    "marketer": ["marketing manager"],
    "mentor": [],
    "investor": ["venture capital", "angel"],
}

DEFAULT_SKILL_FAMILIES: dict[str, list[str]] = {
    "web": ["web developer", "web development", "frontend", "backend",
            "full stack", "javascript"],
    "website": ["web development", "web developer", "frontend"],
    "frontend": ["react", "angular", "javascript", "html", "css"],
    "backend": ["node", "api", "python", "java", "database"],
    "full stack": ["frontend", "backend", "web development"],
    "software": ["software engineer", "software development", "programming"],
    "app": ["mobile development", "android", "ios"],
    "mobile": ["mobile development", "ios", "android", "react native", "flutter"],
    "data": ["data science", "data analysis", "machine learning", "analytics"],
    "machine learning": ["ml", "artificial intelligence", "deep learning"],
    "ai": ["artificial intelligence", "machine learning"],
    "cloud": ["cloud computing", "aws", "azure", "gcp", "devops"],
    "devops": ["kubernetes", "docker", "ci/cd"],
    "design": ["ui design", "ux design", "graphic design", "product design"],
    "marketing": ["digital marketing", "seo", "content marketing", "social media",
                  "branding"],
    "sales": ["business development", "sales"],
    "finance": ["financial analysis", "accounting", "investment", "banking"],
    "legal": ["law", "litigation", "corporate law", "legal advisory"],
    "law": ["legal", "litigation", "corporate law"],
    "healthcare": ["medical", "health", "pharma", "hospital"],
    "agriculture": ["agritech", "farming", "agri"],
    "education": ["edtech", "teaching", "training"],
    "social impact": ["ngo", "nonprofit", "social enterprise"],
    "python": [],
    "java": [],
    "javascript": ["js", "node"],
    "react": [],
    "blockchain": ["web3", "crypto"],
    "cybersecurity": ["security", "infosec"],
    "product management": ["product manager"],
}

DEFAULT_STOP_WORDS: list[str] = [
    "a", "an", "the", "and", "or", "for", "with", "from", "who", "whom", "can",
    "could", "help", "need", "want", "find", "show", "any", "more", "me", "i",
    "in", "at", "of", "on", "to", "is", "are", "am", "be", "some", "someone",
    "anyone", "people", "person", "alumni", "alumnus", "list", "search", "get",
    "give", "please", "working", "work", "works", "based", "located", "living",
    "lives", "there", "here", "about", "know", "do", "does", "you", "your",
    "my", "we", "our", "us", "looking", "look", "profile", "profiles", "tell",
    "what", "which", "where", "how", "all", "who's", "whos", "good", "best",
    "experts", "expert", "professional", "professionals", "near", "around",
    "also", "only", "just", "but", "else", "other", "others",
]

DEFAULT_FOLLOW_UP_PHRASES: list[str] = [
    "more", "show more", "any more", "anymore", "anyone else", "someone else",
    "next", "another", "additional", "others", "other", "give me more",
    "tell me more", "show me more", "what else", "more please", "more results",
    "more profiles", "load more", "continue", "more matches", "show others",
]

DEFAULT_GREETINGS: list[str] = [
    "hi", "hello", "hey", "hii", "namaste", "good morning", "good evening",
    "good afternoon", "thanks", "thank you",
]

DEFAULT_HELP_TERMS: list[str] = [
    "help", "advice", "advise", "assist", "assistance", "consult",
    "consultation", "guidance", "guide", "mentor", "mentorship", "support",
]

DEFAULT_SENIORITY_TERMS: list[str] = [
    "senior", "experienced", "veteran", "seasoned", "expert", "lead", "head",
]


class Vocabulary(BaseModel):
    """Tables for spelling correction and category extraction."""

    corrections: dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_CORRECTIONS))
    locations: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_LOCATIONS.items()},
    )
    institutions: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_INSTITUTIONS.items()},
    )
    companies: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_COMPANIES.items()},
    )
    roles: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_ROLES.items()},
    )
    skill_families: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_SKILL_FAMILIES.items()},
    )
    stop_words: list[str] = Field(default_factory=lambda: list(DEFAULT_STOP_WORDS))
    follow_up_phrases: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FOLLOW_UP_PHRASES),
    )
    greetings: list[str] = Field(default_factory=lambda: list(DEFAULT_GREETINGS))
    help_terms: list[str] = Field(default_factory=lambda: list(DEFAULT_HELP_TERMS))
    seniority_terms: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SENIORITY_TERMS),
    )

    @model_validator(mode="after")
    def corrections_are_closed(self) -> "Vocabulary":
        """Reject tables that would make normalization non-idempotent."""
        lowered: dict[str, str] = {}
        for wrong, right in self.corrections.items():
            key = wrong.strip().lower()
            if not _WORD.match(key):
                msg = f"correction key must be a single word, got '{wrong}'"
                raise ValueError(msg)
            words = right.lower().split()
            if not words or not all(_WORD.match(w) for w in words):
                msg = f"correction value for '{wrong}' must be plain words, got '{right}'"
                raise ValueError(msg)
            lowered[key] = " ".join(words)
        value_words = {w for right in lowered.values() for w in right.split()}
        clashing = sorted(value_words & lowered.keys())
        if clashing:
            msg = f"correction values must not themselves be corrected: {clashing}"
            raise ValueError(msg)
        self.corrections = lowered
        return self

    def all_terms(self) -> set[str]:
        """Every single word that belongs to an extraction vocabulary."""
        words: set[str] = set()
        for table in (
            self.locations,
            self.institutions,
            self.companies,
            self.roles,
            self.skill_families,
        ):
            for key, variants in table.items():
                for phrase in (key, *variants):
                    words.update(phrase.lower().split())
        words.update(self.help_terms)
        words.update(self.seniority_terms)
        return words

from __future__ import annotations

from types import MappingProxyType

UNITED_STATES = "United States"

TRUSTED_JOB_HOSTS = frozenset(
    {
        "greenhouse.io",
        "boards.greenhouse.io",
        "lever.co",
        "jobs.lever.co",
        "workable.com",
        "ashbyhq.com",
        "jobs.ashbyhq.com",
        "smartrecruiters.com",
        "breezy.hr",
        "myworkdayjobs.com",
        "indeed.com",
        "glassdoor.com",
        "linkedin.com",
        "lnkd.in",
        "angel.co",
        "eightfold.ai",
    }
)

JOB_URL_RED_FLAGS = frozenset({"example", "sample", "placeholder", "dummy", "lorem", "acme"})

LINKEDIN_HOST_MARKERS = ("linkedin", "lnkd.in")

# Anchor texts that collectors sometimes hand over instead of a real title.
GENERIC_JOB_TITLES = frozenset(
    {
        "apply",
        "apply now",
        "apply here",
        "details",
        "job",
        "jobs",
        "learn more",
        "more",
        "open roles",
        "read more",
        "see more",
        "view job",
        "view role",
    }
)

JOB_SOURCE_PRIORITY = MappingProxyType(
    {
        "careers-site": 3,
        "linkedin": 2,
        "linkedin-post": 1,
        "other": 0,
        "intel-agent": 0,
    }
)

FIRST_PARTY_SOURCES = frozenset({"careers-site", "ats-api"})

COUNTRY_ALIASES = MappingProxyType(
    {
        "us": UNITED_STATES,
        "u.s.": UNITED_STATES,
        "u.s": UNITED_STATES,
        "usa": UNITED_STATES,
        "u.s.a.": UNITED_STATES,
        "u.s.a": UNITED_STATES,
        "america": UNITED_STATES,
        "united states": UNITED_STATES,
        "united states of america": UNITED_STATES,
        "uk": "United Kingdom",
        "u.k.": "United Kingdom",
        "gb": "United Kingdom",
        "great britain": "United Kingdom",
        "britain": "United Kingdom",
        "england": "United Kingdom",
        "scotland": "United Kingdom",
        "wales": "United Kingdom",
        "northern ireland": "United Kingdom",
        "united kingdom": "United Kingdom",
        "il": "Israel",
        "isr": "Israel",
        "israel": "Israel",
        "in": "India",
        "ind": "India",
        "india": "India",
        "de": "Germany",
        "deu": "Germany",
        "deutschland": "Germany",
        "germany": "Germany",
        "fr": "France",
        "france": "France",
        "es": "Spain",
        "spain": "Spain",
        "pt": "Portugal",
        "portugal": "Portugal",
        "nl": "Netherlands",
        "holland": "Netherlands",
        "the netherlands": "Netherlands",
        "netherlands": "Netherlands",
        "ie": "Ireland",
        "ireland": "Ireland",
        "pl": "Poland",
        "poland": "Poland",
        "se": "Sweden",
        "sweden": "Sweden",
        "ch": "Switzerland",
        "switzerland": "Switzerland",
        "ca": "Canada",
        "can": "Canada",
        "canada": "Canada",
        "mx": "Mexico",
        "mexico": "Mexico",
        "br": "Brazil",
        "brasil": "Brazil",
        "brazil": "Brazil",
        "au": "Australia",
        "aus": "Australia",
        "australia": "Australia",
        "nz": "New Zealand",
        "new zealand": "New Zealand",
        "sg": "Singapore",
        "singapore": "Singapore",
        "jp": "Japan",
        "japan": "Japan",
        "cn": "China",
        "prc": "China",
        "china": "China",
        "kr": "South Korea",
        "korea": "South Korea",
        "south korea": "South Korea",
        "ae": "United Arab Emirates",
        "uae": "United Arab Emirates",
        "u.a.e.": "United Arab Emirates",
        "united arab emirates": "United Arab Emirates",
        "cz": "Czech Republic",
        "czechia": "Czech Republic",
        "czech republic": "Czech Republic",
    }
)

CITY_COUNTRY = MappingProxyType(
    {
        "tel aviv": ("Tel Aviv", "Israel"),
        "tel-aviv": ("Tel Aviv", "Israel"),
        "tel aviv-yafo": ("Tel Aviv", "Israel"),
        "jerusalem": ("Jerusalem", "Israel"),
        "haifa": ("Haifa", "Israel"),
        "herzliya": ("Herzliya", "Israel"),
        "ramat gan": ("Ramat Gan", "Israel"),
        "petah tikva": ("Petah Tikva", "Israel"),
        "bangalore": ("Bangalore", "India"),
        "bengaluru": ("Bengaluru", "India"),
        "mumbai": ("Mumbai", "India"),
        "pune": ("Pune", "India"),
        "hyderabad": ("Hyderabad", "India"),
        "chennai": ("Chennai", "India"),
        "delhi": ("Delhi", "India"),
        "new delhi": ("New Delhi", "India"),
        "gurgaon": ("Gurgaon", "India"),
        "london": ("London", "United Kingdom"),
        "manchester": ("Manchester", "United Kingdom"),
        "edinburgh": ("Edinburgh", "United Kingdom"),
        "dublin": ("Dublin", "Ireland"),
        "berlin": ("Berlin", "Germany"),
        "munich": ("Munich", "Germany"),
        "hamburg": ("Hamburg", "Germany"),
        "paris": ("Paris", "France"),
        "amsterdam": ("Amsterdam", "Netherlands"),
        "madrid": ("Madrid", "Spain"),
        "barcelona": ("Barcelona", "Spain"),
        "lisbon": ("Lisbon", "Portugal"),
        "warsaw": ("Warsaw", "Poland"),
        "stockholm": ("Stockholm", "Sweden"),
        "zurich": ("Zurich", "Switzerland"),
        "new york": ("New York", UNITED_STATES),
        "new york city": ("New York", UNITED_STATES),
        "nyc": ("New York", UNITED_STATES),
        "san francisco": ("San Francisco", UNITED_STATES),
        "seattle": ("Seattle", UNITED_STATES),
        "austin": ("Austin", UNITED_STATES),
        "boston": ("Boston", UNITED_STATES),
        "chicago": ("Chicago", UNITED_STATES),
        "los angeles": ("Los Angeles", UNITED_STATES),
        "toronto": ("Toronto", "Canada"),
        "vancouver": ("Vancouver", "Canada"),
        "montreal": ("Montreal", "Canada"),
        "sydney": ("Sydney", "Australia"),
        "melbourne": ("Melbourne", "Australia"),
        "singapore": ("Singapore", "Singapore"),
        "tokyo": ("Tokyo", "Japan"),
        "sao paulo": ("Sao Paulo", "Brazil"),
        "mexico city": ("Mexico City", "Mexico"),
        "dubai": ("Dubai", "United Arab Emirates"),
    }
)

US_STATE_CODES = frozenset(
    {
        "AL", "AK", "AZ", "AR", "CA", "CO", "CT", "DE", "DC", "FL", "GA", "HI", "ID", "IL",
        "IN", "IA", "KS", "KY", "LA", "ME", "MD", "MA", "MI", "MN", "MS", "MO", "MT", "NE",
        "NV", "NH", "NJ", "NM", "NY", "NC", "ND", "OH", "OK", "OR", "PA", "RI", "SC", "SD",
        "TN", "TX", "UT", "VT", "VA", "WA", "WV", "WI", "WY",
    }
)

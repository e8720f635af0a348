"""
SEO artifacts generated from constant site data: sitemap XML, robots.txt,
per-page meta tags and schema.org JSON-LD blocks.
"""
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any
from xml.sax.saxutils import escape, quoteattr

from talencor.config import get_settings
from talencor.services.site_content import COMPANY_INFO, FAQS, SERVICES

SEO_CONFIG = {
    "site_name": "Talencor Staffing",
    "default_title": "Talencor Staffing | Professional Staffing Solutions in Toronto & GTA",
    "default_description": (
        "Leading staffing agency in Toronto and GTA providing recruiting, training, payroll "
        "administration, labour relations, permanent placements, and consulting services."
    ),
    "default_image": "/og-image.jpg",
    "twitter_handle": "@TalencorStaffing",
    "business_phone": "(647) 946-2177",
    "business_hours": "Mo-Fr 10:00-17:00",
    "keywords": {
        "primary": [
            "staffing agency Toronto",
            "recruitment services GTA",
            "temporary staffing",
            "permanent placement",
            "workforce solutions",
        ],
        "secondary": [
            "employee training",
            "payroll services",
            "labour relations",
            "HR consulting",
            "WHMIS certification",
        ],
        "location": [
            "Toronto staffing",
            "GTA recruitment",
            "Mississauga staffing",
            "Ontario workforce",
            "Greater Toronto Area",
        ],
    },
}

POSTAL_ADDRESS = {
    "@type": "PostalAddress",
    "streetAddress": "2985 Drew Rd #206, Airport Business Complex",
    "addressLocality": "Mississauga",
    "addressRegion": "ON",
    "postalCode": "L4T 0A4",
    "addressCountry": "CA",
}

GEO = {"@type": "GeoCoordinates", "latitude": "43.6777", "longitude": "-79.6248"}

SITEMAP_NAMESPACES = (
    'xmlns="http://www.sitemaps.org/schemas/sitemap/0.9"\n'
    '        xmlns:xhtml="http://www.w3.org/1999/xhtml"'
)


@dataclass(frozen=True)
class SitemapEntry:
    path: str
    changefreq: str
    priority: float


SITEMAP_ENTRIES = [
    SitemapEntry("/", "weekly", 1.0),
    SitemapEntry("/about", "monthly", 0.8),
    SitemapEntry("/services", "weekly", 0.9),
    SitemapEntry("/services/recruiting", "monthly", 0.8),
    SitemapEntry("/services/training", "monthly", 0.8),
    SitemapEntry("/services/payroll-administration", "monthly", 0.8),
    SitemapEntry("/services/labour-relations", "monthly", 0.8),
    SitemapEntry("/services/full-time-placements", "monthly", 0.8),
    SitemapEntry("/services/consulting", "monthly", 0.8),
    SitemapEntry("/job-seekers", "weekly", 0.7),
    SitemapEntry("/employers", "weekly", 0.7),
    SitemapEntry("/contact", "monthly", 0.6),
    SitemapEntry("/apply", "monthly", 0.5),
]

SERVICE_SITEMAP_ENTRIES = [e for e in SITEMAP_ENTRIES if e.path.startswith("/services")]
JOB_SITEMAP_ENTRIES = [
    e for e in SITEMAP_ENTRIES if e.path in ("/job-seekers", "/employers", "/apply")
]

# path -> (title, description, breadcrumb trail)
PAGE_META: dict[str, dict[str, Any]] = {
    "/": {
        "title": SEO_CONFIG["default_title"],
        "description": SEO_CONFIG["default_description"],
    },
    "/about": {
        "title": "About Us",
        "description": "Learn about Talencor Staffing, a Mississauga staffing agency screening and placing skilled workers across the Greater Toronto Area.",
    },
    "/services": {
        "title": "Staffing Services",
        "description": "Recruiting, training, payroll administration, labour relations, full-time placements and consulting for employers in Toronto and the GTA.",
    },
    "/job-seekers": {
        "title": "Job Seekers",
        "description": "Find temporary and permanent jobs in the GTA. Apply once and our recruiters match you with opportunities that fit your skills and schedule.",
    },
    "/employers": {
        "title": "Employers",
        "description": "Qualified, pre-screened workers within 24-48 hours. Post a job and let Talencor Staffing handle recruiting, payroll and compliance.",
    },
    "/contact": {
        "title": "Contact Us",
        "description": f"Call {COMPANY_INFO['phone']} or visit us at the Airport Business Complex in Mississauga. We respond within one business day.",
    },
    "/apply": {
        "title": "Apply Now",
        "description": "Submit your job application to Talencor Staffing for warehouse, manufacturing, driving and office positions across the GTA.",
    },
    "/jobs": {
        "title": "Current Job Openings",
        "description": "Browse current job openings from Talencor Staffing clients across Toronto, Mississauga and the GTA.",
    },
    "/post-job": {
        "title": "Post a Job",
        "description": "Tell us about the role you need filled. Existing clients are prioritized for immediate processing.",
    },
    "/admin": {"title": "Admin", "description": "Talencor Staffing administration.", "no_index": True},
    "/client-login": {"title": "Client Portal", "description": "Client portal sign in.", "no_index": True},
}
for _service in SERVICES:
    PAGE_META[f"/services/{_service['id']}"] = {
        "title": f"{_service['title']} Services Toronto & GTA",
        "description": _service["description"] + ".",
        "service": _service,
    }

_PATH_LABELS = {"services": "Services", "job-seekers": "Job Seekers", "employers": "Employers"}


def _site_url() -> str:
    return get_settings().site_base_url


def _format_priority(priority: float) -> str:
    return f"{priority:g}"


def generate_sitemap(
    entries: list[SitemapEntry],
    base_url: str | None = None,
    lastmod: date | None = None,
) -> str:
    """urlset document with one <url> per entry, each carrying hreflang alternates."""
    base = (base_url if base_url is not None else _site_url()).rstrip("/")
    day = (lastmod or datetime.now(timezone.utc).date()).isoformat()
    urls = []
    for entry in entries:
        loc = f"{base}{entry.path}"
        alternates = [
            ("en-ca", loc),
            ("en-us", f"{loc}?region=us"),
            ("fr-ca", f"{base}/fr{entry.path}"),
            ("x-default", loc),
        ]
        links = "\n".join(
            f'    <xhtml:link rel="alternate" hreflang="{lang}" href={quoteattr(href)} />'
            for lang, href in alternates
        )
        urls.append(
            f"  <url>\n"
            f"    <loc>{escape(loc)}</loc>\n"
            f"    <lastmod>{day}</lastmod>\n"
            f"    <changefreq>{entry.changefreq}</changefreq>\n"
            f"    <priority>{_format_priority(entry.priority)}</priority>\n"
            f"{links}\n"
            f"  </url>"
        )
    body = "\n".join(urls)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        f"<urlset {SITEMAP_NAMESPACES}>\n"
        f"{body}\n"
        "</urlset>\n"
    )


def generate_robots_txt(base_url: str | None = None, today: date | None = None) -> str:
    base = (base_url if base_url is not None else _site_url()).rstrip("/")
    day = (today or datetime.now(timezone.utc).date()).isoformat()
    return f"""# Robots.txt for Talencor Staffing
# Last updated: {day}

# Google Bot
User-agent: Googlebot
Allow: /
Allow: /services/
Allow: /job-seekers
Allow: /employers
Allow: /contact
Allow: /about
Allow: /apply
Crawl-delay: 0

# Bing Bot
User-agent: Bingbot
Allow: /
Crawl-delay: 1

# All other bots
User-agent: *
Allow: /
Disallow: /api/
Disallow: /admin/
Disallow: /*.json$
Disallow: /*?
Allow: /*?region=
Allow: /*?utm_
Crawl-delay: 2

# Specific bot directives
User-agent: AdsBot-Google
Allow: /

User-agent: Googlebot-Image
Allow: /
Allow: *.jpg
Allow: *.jpeg
Allow: *.png
Allow: *.webp
Allow: *.svg

User-agent: Googlebot-Mobile
Allow: /

# AI and LLM Crawlers
User-agent: GPTBot
Allow: /
Crawl-delay: 3

User-agent: ChatGPT-User
Allow: /
Crawl-delay: 3

User-agent: CCBot
Allow: /
Crawl-delay: 5

User-agent: anthropic-ai
Allow: /
Crawl-delay: 3

User-agent: Claude-Web
Allow: /
Crawl-delay: 3

# Social Media Crawlers
User-agent: facebookexternalhit
Allow: /

User-agent: Twitterbot
Allow: /

User-agent: LinkedInBot
Allow: /

# Block bad bots
User-agent: SemrushBot
Disallow: /

User-agent: AhrefsBot
Disallow: /

User-agent: MJ12bot
Disallow: /

# Sitemaps
Sitemap: {base}/sitemap.xml
Sitemap: {base}/sitemap-services.xml
Sitemap: {base}/sitemap-jobs.xml

# Host directive (non-standard but supported by some crawlers)
Host: {base}
"""


def generate_meta_tags(
    title: str,
    description: str,
    keywords: list[str] | None = None,
    canonical: str | None = None,
    no_index: bool = False,
) -> dict[str, Any]:
    """Title gets the site-name suffix unless it already mentions the site."""
    site_name = SEO_CONFIG["site_name"]
    site_url = _site_url()
    full_title = title if site_name in title else f"{title} | {site_name}"
    canonical_url = f"{site_url}{canonical}" if canonical else None
    return {
        "title": full_title,
        "description": description,
        "keywords": ", ".join(keywords or SEO_CONFIG["keywords"]["primary"]),
        "canonical": canonical_url,
        "robots": "noindex,nofollow" if no_index else "index,follow",
        "og_title": full_title,
        "og_description": description,
        "og_type": "website",
        "og_url": canonical_url or site_url,
        "og_image": SEO_CONFIG["default_image"],
        "twitter_card": "summary_large_image",
        "twitter_site": SEO_CONFIG["twitter_handle"],
        "twitter_title": full_title,
        "twitter_description": description,
        "twitter_image": SEO_CONFIG["default_image"],
    }


def meta_for_path(path: str) -> dict[str, Any]:
    """Meta tags for a known site path; unknown paths get the defaults with their canonical."""
    normalized = "/" + path.strip("/") if path.strip("/") else "/"
    page = PAGE_META.get(normalized)
    if page is None:
        return generate_meta_tags(
            SEO_CONFIG["default_title"], SEO_CONFIG["default_description"], canonical=normalized
        )
    return generate_meta_tags(
        page["title"],
        page["description"],
        canonical=normalized,
        no_index=page.get("no_index", False),
    )


def organization_structured_data() -> dict[str, Any]:
    site_url = _site_url()
    return {
        "@context": "https://schema.org",
        "@type": "Organization",
        "name": SEO_CONFIG["site_name"],
        "url": site_url,
        "logo": f"{site_url}/logo.png",
        "contactPoint": {
            "@type": "ContactPoint",
            "telephone": SEO_CONFIG["business_phone"],
            "contactType": "customer service",
            "areaServed": "CA",
            "availableLanguage": "English",
        },
        "address": POSTAL_ADDRESS,
        "geo": GEO,
        "openingHours": SEO_CONFIG["business_hours"],
        "sameAs": [
            "https://www.linkedin.com/company/talencor-staffing",
            "https://www.facebook.com/TalencorStaffing",
        ],
    }


def local_business_structured_data() -> dict[str, Any]:
    site_url = _site_url()
    return {
        "@context": "https://schema.org",
        "@type": "EmploymentAgency",
        "name": SEO_CONFIG["site_name"],
        "image": f"{site_url}/logo.png",
        "telephone": SEO_CONFIG["business_phone"],
        "address": POSTAL_ADDRESS,
        "geo": GEO,
        "url": site_url,
        "openingHours": SEO_CONFIG["business_hours"],
        "priceRange": "$$",
        "areaServed": {
            "@type": "GeoCircle",
            "geoMidpoint": {"@type": "GeoCoordinates", "latitude": "43.6532", "longitude": "-79.3832"},
            "geoRadius": "50000",
        },
    }


def breadcrumbs_for_path(path: str) -> list[dict[str, str]]:
    crumbs = [{"name": "Home", "url": "/"}]
    parts = [p for p in path.strip("/").split("/") if p]
    current = ""
    for part in parts:
        current += f"/{part}"
        service = next((s for s in SERVICES if s["id"] == part), None)
        if service:
            name = service["title"]
        else:
            name = _PATH_LABELS.get(part, part.replace("-", " ").title())
        crumbs.append({"name": name, "url": current})
    return crumbs


def breadcrumb_structured_data(breadcrumbs: list[dict[str, str]]) -> dict[str, Any]:
    site_url = _site_url()
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": i,
                "name": crumb["name"],
                "item": f"{site_url}{crumb['url']}",
            }
            for i, crumb in enumerate(breadcrumbs, start=1)
        ],
    }


def faq_structured_data(faqs: list[dict[str, str]] | None = None) -> dict[str, Any]:
    return {
        "@context": "https://schema.org",
        "@type": "FAQPage",
        "mainEntity": [
            {
                "@type": "Question",
                "name": faq["question"],
                "acceptedAnswer": {"@type": "Answer", "text": faq["answer"]},
            }
            for faq in (faqs if faqs is not None else FAQS)
        ],
    }


def service_structured_data(
    name: str,
    description: str,
    service_type: str,
    area_served: str = "Greater Toronto Area",
) -> dict[str, Any]:
    address = {k: v for k, v in POSTAL_ADDRESS.items() if k != "postalCode"}
    return {
        "@context": "https://schema.org",
        "@type": "Service",
        "name": name,
        "description": description,
        "provider": {
            "@type": "Organization",
            "name": SEO_CONFIG["site_name"],
            "address": address,
            "telephone": SEO_CONFIG["business_phone"],
        },
        "serviceType": service_type,
        "areaServed": area_served,
    }

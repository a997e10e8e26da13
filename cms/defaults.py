"""
cms/defaults.py -- Starter snapshots for the four editable pages.

Used by POST /api/v1/content/admin/initialize and `python main.py
seed-content`. Pages that already exist are left alone.
"""

from cms.store import CMSStore

_ADDRESS = "guha road, dum dum, kolkata -700028 West Bengal, India"
_PHONE = "+91 9064258642"
_EMAIL = "info@admissionshala.com"

DEFAULT_CONTENT: dict[str, dict] = {
    "home": {
        "hero": {
            "title": "Your Gateway to Educational Excellence",
            "subtitle": "Discover the best colleges and courses for your future",
            "backgroundImage": "/images/hero-bg.jpg",
        },
        "stats": {
            "students": "10,000+",
            "colleges": "500+",
            "courses": "1,000+",
            "successRate": "95%",
        },
    },
    "about": {
        "hero": {
            "title": "About The Education Expert",
            "subtitle": "Your trusted partner in educational journey",
        },
        "mission": {
            "title": "Our Mission",
            "description": (
                "To provide comprehensive guidance for college admissions, "
                "career counseling, and academic excellence."
            ),
        },
        "vision": {
            "title": "Our Vision",
            "description": (
                "To be the leading educational consultancy that empowers "
                "students to achieve their academic dreams."
            ),
        },
    },
    "contact": {
        "hero": {
            "title": "Get in Touch",
            "subtitle": "We are here to help you with your educational journey",
        },
        "office": {"address": _ADDRESS, "phone": _PHONE, "email": _EMAIL},
        "hours": {
            "weekdays": "11:00 AM - 7:00 PM",
            "saturday": "11:00 AM - 5:00 PM",
            "sunday": "Closed",
        },
    },
    "footer": {
        "company": {
            "name": "The Education Expert",
            "tagline": "Your Gateway to Success",
            "description": (
                "The Education Expert is your trusted partner in educational journey. "
                "We provide comprehensive guidance for college admissions, career "
                "counseling, and academic excellence."
            ),
        },
        "contact": {"address": _ADDRESS, "phone": _PHONE, "email": _EMAIL},
        "social": {
            "facebook": "#",
            "twitter": "#",
            "instagram": "#",
            "linkedin": "#",
            "youtube": "#",
        },
        "links": {
            "quickLinks": ["Home", "About Us", "Courses", "Colleges", "Blogs", "Contact Us"],
            "services": [
                "Career Counseling",
                "College Admissions",
                "Entrance Exam Prep",
                "Scholarship Guidance",
            ],
        },
    },
}


def initialize_content(store: CMSStore, actor_id: int) -> list[str]:
    """Create every missing page from DEFAULT_CONTENT. Returns one status line per page."""
    results = []
    for page, sections in DEFAULT_CONTENT.items():
        if store.get_content(page) is None:
            store.save_content(page, actor_id, sections=sections)
            results.append(f"{page} content created")
        else:
            results.append(f"{page} content already exists")
    return results

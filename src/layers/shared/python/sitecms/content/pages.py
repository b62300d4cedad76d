"""Default content for the site's pages.

Each entry is what a page looks like before any editor has touched it. The
seed endpoint pushes these into the table. Section ids here are the ids the
front end renders and the ids content keys point at, so renaming one orphans
any stored edits to it.
"""


def _seo(section_id: str, aria_label: str) -> dict:
    return {"ariaLabel": aria_label, "sectionId": section_id, "dataSectionName": section_id}


HOME_PAGE = {
    "name": "Home",
    "seo": {
        "pageTitle": "Northline Studio | Corporate Event Photography",
        "metaDescription": "Event photography, headshots and same-day media for conferences, "
        "conventions and corporate events.",
        "ogImage": "/images/generated/og-home.jpg",
    },
    "sections": [
        {
            "id": "hero-1",
            "type": "hero",
            "seo": _seo("hero-1", "Northline Studio hero banner"),
            "variant": "full-height",
            "headline": "Event Media That Makes You Look Like the Pro",
            "subheadline": "Certified operators who know the venues and fit your production timeline.",
            "backgroundImage": {
                "src": "/images/generated/hero-homepage.jpg",
                "alt": "Photographer working at a corporate event",
            },
            "buttons": [
                {"text": "Talk With Our Team", "href": "/contact", "variant": "primary"},
                {"text": "See Our Services", "href": "/services", "variant": "secondary"},
            ],
        },
        {
            "id": "feature-grid-services",
            "type": "feature-grid",
            "seo": _seo("feature-grid-services", "Our services"),
            "heading": "What We Cover",
            "columns": 3,
            "features": [
                {
                    "id": "feature-grid-services-card-0",
                    "icon": "Camera",
                    "title": "Event Coverage",
                    "description": "Keynotes, breakouts, receptions and everything between.",
                    "link": {"text": "Learn more", "href": "/services"},
                },
                {
                    "id": "feature-grid-services-card-1",
                    "icon": "UserSquare",
                    "title": "Headshot Activations",
                    "description": "Polished headshots for attendees in under five minutes.",
                },
                {
                    "id": "feature-grid-services-card-2",
                    "icon": "Video",
                    "title": "Event Video",
                    "description": "Highlight reels and session capture delivered fast.",
                },
            ],
        },
        {
            "id": "stats-proof",
            "type": "stats",
            "seo": _seo("stats-proof", "Results in numbers"),
            "heading": "By the Numbers",
            "items": [
                {"id": "stats-proof-stat-0", "value": "500+", "label": "Events covered"},
                {"id": "stats-proof-stat-1", "value": "24h", "label": "Gallery turnaround"},
                {"id": "stats-proof-stat-2", "value": "98%", "label": "Repeat clients"},
            ],
        },
        {
            "id": "testimonials-clients",
            "type": "testimonials",
            "seo": _seo("testimonials-clients", "Client testimonials"),
            "heading": "What Planners Say",
            "layout": "carousel",
            "testimonials": [
                {
                    "id": "testimonials-clients-0",
                    "quote": "They blended into our production and delivered images the same evening.",
                    "authorName": "Dana Whitfield",
                    "authorTitle": "Events Director, Meridian Association",
                },
            ],
        },
        {
            "id": "cta-final",
            "type": "cta",
            "seo": _seo("cta-final", "Book your event"),
            "headline": "Ready to Plan Your Event Media?",
            "subtext": "Tell us about your dates and venue and we will confirm availability.",
            "backgroundType": "gradient",
            "backgroundValue": "linear-gradient(135deg, #0A0A0A 0%, #1A1A1A 100%)",
            "primaryButton": {"text": "Check Availability", "href": "/contact", "variant": "primary"},
        },
    ],
}

ABOUT_PAGE = {
    "name": "About",
    "seo": {
        "pageTitle": "About Northline Studio",
        "metaDescription": "Who we are and how we work with event teams.",
    },
    "sections": [
        {
            "id": "hero-about",
            "type": "hero",
            "seo": _seo("hero-about", "About us"),
            "variant": "half-height",
            "headline": "An Extension of Your Event Team",
            "subheadline": "Built by operators who have worked the room.",
        },
        {
            "id": "text-block-story",
            "type": "text-block",
            "seo": _seo("text-block-story", "Our story"),
            "heading": "Our Story",
            "content": "<p>We started shooting trade shows in 2012 and never stopped.</p>"
            "<p>Today our team covers hundreds of events a year.</p>",
        },
        {
            "id": "image-gallery-team",
            "type": "image-gallery",
            "seo": _seo("image-gallery-team", "Team at work"),
            "heading": "On Site",
            "layout": "grid",
            "images": [
                {"id": "image-gallery-team-0", "src": "/images/generated/team-1.jpg", "alt": "Team at a convention"},
                {"id": "image-gallery-team-1", "src": "/images/generated/team-2.jpg", "alt": "Headshot station"},
            ],
        },
    ],
}

SERVICES_PAGE = {
    "name": "Services",
    "seo": {
        "pageTitle": "Services | Northline Studio",
        "metaDescription": "Event coverage, headshot activations and event video.",
    },
    "sections": [
        {
            "id": "hero-services",
            "type": "hero",
            "seo": _seo("hero-services", "Services"),
            "variant": "banner",
            "headline": "Services",
        },
        {
            "id": "columns-overview",
            "type": "columns",
            "seo": _seo("columns-overview", "Service overview"),
            "layout": "equal-2",
            "columns": [
                {
                    "sections": [
                        {
                            "id": "text-block-coverage",
                            "type": "text-block",
                            "content": "<h3>Event Coverage</h3><p>Full-day and multi-day coverage.</p>",
                        },
                    ],
                },
                {
                    "sections": [
                        {
                            "id": "text-block-headshots",
                            "type": "text-block",
                            "content": "<h3>Headshots</h3><p>Studio-quality portraits on the show floor.</p>",
                        },
                    ],
                },
            ],
        },
        {
            "id": "cta-services",
            "type": "cta",
            "seo": _seo("cta-services", "Get a quote"),
            "headline": "Get a Quote",
            "primaryButton": {"text": "Contact Us", "href": "/contact", "variant": "primary"},
        },
    ],
}

FAQS_PAGE = {
    "name": "FAQs",
    "seo": {
        "pageTitle": "Frequently Asked Questions | Northline Studio",
        "metaDescription": "Answers about booking, delivery and pricing.",
    },
    "sections": [
        {
            "id": "faq-general",
            "type": "faq",
            "seo": _seo("faq-general", "Frequently asked questions"),
            "heading": "Frequently Asked Questions",
            "items": [
                {
                    "id": "faq-general-0",
                    "question": "How far ahead should we book?",
                    "answer": "<p>Four to six weeks is ideal; we can often help sooner.</p>",
                },
                {
                    "id": "faq-general-1",
                    "question": "When do we receive images?",
                    "answer": "<p>Same-day selects, full galleries within 24 hours.</p>",
                },
            ],
        },
    ],
}

CONTACT_PAGE = {
    "name": "Contact",
    "seo": {
        "pageTitle": "Contact | Northline Studio",
        "metaDescription": "Tell us about your event.",
    },
    "sections": [
        {
            "id": "hero-contact",
            "type": "hero",
            "seo": _seo("hero-contact", "Contact us"),
            "variant": "banner",
            "headline": "Let's Talk About Your Event",
        },
        {
            "id": "text-block-details",
            "type": "text-block",
            "seo": _seo("text-block-details", "Contact details"),
            "content": "<p>Email <a href=\"mailto:hello@example.com\">hello@example.com</a>.</p>",
        },
    ],
}

"""Static content of the portfolio page."""

NAME = "Tika Capon"
HEADLINE = "Product Architect & Engineer"

BIO = [
    "I am an engineer interested in how things work, whether that's a "
    "mechanical assembly, a software pipeline, or a musical composition.",
    "I started coding as a teenager, but I am currently focused on rigorous "
    "engineering at Tufts University. I've spent my summer scaling AI "
    "infrastructure & bug squashing at Delphi.",
    "I am obsessed with autonomy, aesthetics, and efficiency. I build things "
    "to learn how they break, then I build them again.",
]

LINKS = [
    {"label": "X", "href": "https://x.com/iocapon"},
    {"label": "Email", "href": "mailto:tika@capon.io"},
    {"label": "LinkedIn", "href": "https://www.linkedin.com/in/tikacapon/"},
    {"label": "GitHub", "href": "https://github.com/tikacapon"},
]


def og_image_url(site_url: str) -> str:
    """Absolute social-preview image url when the site url is known."""
    if site_url:
        return f"{site_url}/opengraph-image.png"
    return "/opengraph-image.png"

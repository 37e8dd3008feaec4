from urllib.parse import unquote, urlparse

from pydantic import BaseModel, ConfigDict, field_validator

import config


class ArticleRef(BaseModel):
    """Identifies an article by the wiki host it lives on and its title."""

    model_config = ConfigDict(frozen=True)

    site: str = config.DEFAULT_SITE
    title: str

    # noinspection PyMethodParameters
    @field_validator("title")
    def validate_title(cls, v):
        v = v.replace("_", " ").strip()
        if not v:
            raise ValueError("title must not be empty")
        return v

    # noinspection PyMethodParameters
    @field_validator("site")
    def validate_site(cls, v):
        if not config.SITE_PATTERN.match(v):
            raise ValueError(f"Invalid site: {v}")
        return v

    @classmethod
    def from_url(cls, url: str) -> "ArticleRef":
        """Build a reference from a canonical article URL,
        e.g. https://en.wikipedia.org/wiki/Dog"""
        parsed = urlparse(url)
        match = config.ARTICLE_PATH_PATTERN.match(parsed.path)
        if not parsed.netloc or not match:
            raise ValueError(f"Not an article URL: {url}")
        return cls(site=parsed.netloc, title=unquote(match.group("title")))

    @property
    def api_url(self) -> str:
        return f"https://{self.site}{config.API_PATH}"

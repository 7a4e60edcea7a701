"""FastAPI dependency injection utilities."""

from typing import Annotated

from fastapi import Depends

from imgcdn.config import get_rewrite_config
from imgcdn.models.config import RewriteConfig

# Type alias for the frozen rewrite configuration
RewriteConfigDep = Annotated[RewriteConfig, Depends(get_rewrite_config)]

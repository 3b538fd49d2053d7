"""Short code generation utilities."""

import secrets
import string
from typing import Optional


class ShortCodeGenerator:
    """Generate random short codes for links."""
    
    # URL-safe alphabet (a-zA-Z0-9, hyphen, underscore): 64 symbols
    URL_SAFE_CHARS = string.ascii_letters + string.digits + "_-"
    
    def __init__(self, default_length: int = 8):
        """Initialize short code generator.
        
        Args:
            default_length: Default length for generated codes
        """
        if not 3 <= default_length <= 20:
            raise ValueError("Short code length must be between 3 and 20")
        self.default_length = default_length
    
    def generate_random(self, length: Optional[int] = None) -> str:
        """Generate a random short code.
        
        Uses the OS CSPRNG so codes cannot be predicted from earlier ones.
        
        Args:
            length: Length of the code (uses default if not specified)
            
        Returns:
            Random short code
        """
        length = length or self.default_length
        return ''.join(secrets.choice(self.URL_SAFE_CHARS) for _ in range(length))

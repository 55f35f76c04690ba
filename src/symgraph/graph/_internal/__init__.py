"""Internal graph machinery: extraction adapters and builders."""

"""Report export — local serializers and the remote/fallback transport."""

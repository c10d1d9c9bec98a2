"""Unit tests for log masking helpers."""

from feegate.utils.security import mask_address, mask_sensitive


class TestMasking:
    """Test masking of sensitive values."""

    def test_mask_address(self):
        assert mask_address("0x1234567890abcdef1234567890abcdef12345678") == "0x1234...5678"

    def test_mask_short_or_empty(self):
        assert mask_address(None) == "***"
        assert mask_address("0x12") == "***"

    def test_mask_private_key(self, sample_private_key):
        masked = mask_sensitive(sample_private_key)
        assert masked == "0x4c...2318"
        assert sample_private_key not in masked

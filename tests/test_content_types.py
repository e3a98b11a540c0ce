"""
Content-type registry tests.

Run with: pytest tests/test_content_types.py -v
"""

import pytest

from docx_core.errors import NotFinalized, TypeConflict
from docx_core.packaging.base import CT_RELATIONSHIPS, CT_WML_DOCUMENT_MAIN, CT_XML
from docx_core.packaging.content_types import ContentTypeRegistry, parse_content_types


@pytest.fixture
def registry():
    return ContentTypeRegistry()


class TestRegistration:
    """Default and override registration."""

    def test_package_defaults_are_preregistered(self, registry):
        """rels and xml defaults are always present."""
        assert registry.resolve("_rels/.rels") == CT_RELATIONSHIPS
        assert registry.resolve("word/styles.xml") == CT_XML

    def test_register_extension_is_idempotent(self, registry):
        """Registering the same mapping twice keeps a single entry."""
        registry.register_extension("svg", "image/svg+xml")
        registry.register_extension(".SVG", "image/svg+xml")
        defaults = [e for e in registry.entries() if e.kind == "Default" and e.key == "svg"]
        assert len(defaults) == 1

    def test_conflicting_extension_raises(self, registry):
        """Same extension with another media type is a TypeConflict."""
        registry.register_extension("svg", "image/svg+xml")
        with pytest.raises(TypeConflict) as excinfo:
            registry.register_extension("svg", "text/xml", context="page 2 vector")
        assert excinfo.value.extension == "svg"
        assert excinfo.value.existing == "image/svg+xml"
        assert excinfo.value.requested == "text/xml"
        assert "page 2 vector" in str(excinfo.value)

    def test_override_wins_over_default(self, registry):
        """The main document part resolves through its override."""
        registry.register_override("/word/document.xml", CT_WML_DOCUMENT_MAIN)
        assert registry.resolve("word/document.xml") == CT_WML_DOCUMENT_MAIN
        assert registry.resolve("word/other.xml") == CT_XML

    def test_unresolvable_part(self, registry):
        """Parts without a known extension resolve to None."""
        assert registry.resolve("word/media/page0001.png") is None
        assert registry.resolve("word/media/noext") is None


class TestMediaTypeLookup:
    """Extension to media type resolution."""

    def test_builtin_image_types(self, registry):
        assert registry.media_type_for("svg") == "image/svg+xml"
        assert registry.media_type_for(".PNG") == "image/png"
        assert registry.media_type_for("jpg") == "image/jpeg"

    def test_registered_type_takes_precedence(self, registry):
        registry.register_extension("png", "image/x-custom-png")
        assert registry.media_type_for("png") == "image/x-custom-png"

    def test_unknown_extension_falls_back(self, registry):
        assert registry.media_type_for("zzqxw") == "application/octet-stream"


class TestFinalize:
    """Finalize-once lifecycle."""

    def test_finalize_produces_declaration_part(self, registry):
        """Defaults come first, overrides after, in registration order."""
        registry.register_extension("svg", "image/svg+xml")
        registry.register_extension("png", "image/png")
        registry.register_override("word/document.xml", CT_WML_DOCUMENT_MAIN)

        part = registry.finalize()

        assert part.name == "[Content_Types].xml"
        assert b'xmlns="http://schemas.openxmlformats.org/package/2006/content-types"' in part.data
        defaults, overrides = parse_content_types(part.data)
        assert list(defaults) == ["rels", "xml", "svg", "png"]
        assert overrides == {"word/document.xml": CT_WML_DOCUMENT_MAIN}
        assert part.data.index(b"<Default") < part.data.index(b"<Override")

    def test_finalize_twice_raises(self, registry):
        registry.finalize()
        with pytest.raises(NotFinalized):
            registry.finalize()

    def test_registration_after_finalize_raises(self, registry):
        registry.finalize()
        with pytest.raises(NotFinalized):
            registry.register_extension("png", "image/png")
        with pytest.raises(NotFinalized):
            registry.register_override("word/document.xml", CT_WML_DOCUMENT_MAIN)

    def test_part_before_finalize_raises(self, registry):
        assert not registry.is_finalized
        with pytest.raises(NotFinalized):
            registry.part
        part = registry.finalize()
        assert registry.is_finalized
        assert registry.part is part

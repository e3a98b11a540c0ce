"""
Package validator tests.

Run with: pytest tests/test_validation.py -v
"""

import io
import zipfile

import pytest

from conftest import read_zip
from docx_core.assembler import DocxAssembler
from docx_core.validation import PackageIssue, PackageValidator, ValidationResult


def rewrite(data, drop=(), replace=None):
    """Copy a package, dropping or replacing entries."""
    replace = replace or {}
    source = read_zip(data)
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as target:
        for name in source.namelist():
            if name in drop:
                continue
            target.writestr(name, replace.get(name, source.read(name)))
    return buffer.getvalue()


@pytest.fixture
def package(three_page_document):
    return DocxAssembler().assemble(three_page_document)


@pytest.fixture
def validator():
    return PackageValidator()


class TestValidPackage:

    def test_assembled_package_is_valid(self, validator, package):
        result = validator.validate_bytes(package)
        assert result.is_valid, result.summary()
        assert result.metadata["main_document"] == "word/document.xml"
        assert result.metadata["part_count"] == 10

    def test_summary_reports_pass(self, validator, package):
        assert validator.validate_bytes(package).summary().startswith("Validation PASSED")

    def test_validate_package_from_disk(self, validator, package, tmp_path):
        path = tmp_path / "doc.docx"
        path.write_bytes(package)
        result = validator.validate_package(path)
        assert result.is_valid
        assert result.metadata["package_path"] == str(path)


class TestBrokenPackages:

    def test_missing_media_is_dangling(self, validator, package):
        result = validator.validate_bytes(rewrite(package, drop={"word/media/page0002.png"}))
        assert not result.is_valid
        assert result.get_errors_by_type() == {"Dangling Reference": 1}
        issue = result.errors[0]
        assert (issue.part, issue.r_id) == ("word/_rels/document.xml.rels", "rId5")

    def test_unknown_embed_id_is_reported(self, validator, package):
        body = read_zip(package).read("word/document.xml").replace(b'r:embed="rId3"', b'r:embed="rId99"')
        result = validator.validate_bytes(rewrite(package, replace={"word/document.xml": body}))
        assert not result.is_valid
        assert [issue.r_id for issue in result.errors] == ["rId99"]
        assert result.errors[0].part == "word/document.xml"

    def test_missing_content_types(self, validator, package):
        result = validator.validate_bytes(rewrite(package, drop={"[Content_Types].xml"}))
        assert not result.is_valid
        assert result.errors[0].part == "[Content_Types].xml"

    def test_undeclared_extension(self, validator, package):
        source = read_zip(package)
        content_types = source.read("[Content_Types].xml").replace(b'Extension="png"', b'Extension="gif"')
        result = validator.validate_bytes(rewrite(package, replace={"[Content_Types].xml": content_types}))
        assert result.get_errors_by_type() == {"Content Types": 3}

    def test_missing_package_relationships(self, validator, package):
        result = validator.validate_bytes(rewrite(package, drop={"_rels/.rels"}))
        assert not result.is_valid
        assert "Validation FAILED" in result.summary()

    def test_not_a_zip(self, validator):
        result = validator.validate_bytes(b"definitely not a zip")
        assert not result.is_valid
        assert result.errors[0].kind == "Container"

    def test_malformed_content_types(self, validator, package):
        result = validator.validate_bytes(rewrite(package, replace={"[Content_Types].xml": b"<not xml"}))
        assert not result.is_valid
        assert result.get_errors_by_type() == {"XML Syntax": 1}
        assert result.metadata["main_document"] == "word/document.xml"


class TestValidationResult:

    def test_warnings_do_not_invalidate(self):
        result = ValidationResult()
        result.add_issue("a.xml", "minor", "Content Types", severity="Warning")
        assert result.is_valid
        assert result.warning_count == 1
        assert result.errors == []

    def test_issues_are_keyed_by_part_and_relationship(self):
        result = ValidationResult()
        issue = result.add_issue("word/_rels/document.xml.rels", "Targets missing part", "Dangling Reference",
                                 r_id="rId4")
        result.add_issue("word/document.xml", "broken", "XML Syntax")

        assert issue == PackageIssue("word/_rels/document.xml.rels", "Dangling Reference",
                                     "Targets missing part", "rId4")
        assert result.issues_for_part("word/document.xml")[0].kind == "XML Syntax"
        assert str(issue) == "word/_rels/document.xml.rels [rId4]: Targets missing part"
        assert "word/_rels/document.xml.rels [rId4]" in result.summary()

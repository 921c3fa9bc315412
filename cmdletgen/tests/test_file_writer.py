"""Tests for the file writers."""

import pytest

from cmdletgen.codegen.file_writer import FileWriter, MemoryWriter, Writer
from cmdletgen.exceptions import OutputError


class TestNormalize:
    """Tests for path normalization."""

    @pytest.mark.parametrize(
        'path,expected',
        [
            ('./Contoso.csproj', 'Contoso.csproj'),
            ('generated/api/Contoso.json', 'generated/api/Contoso.json'),
            ('./generated//./api/Contoso.json', 'generated/api/Contoso.json'),
            ('generated\\api\\Contoso.json', 'generated/api/Contoso.json'),
        ],
    )
    def test_normalize(self, path, expected):
        """Test that './', empty segments and backslashes are normalized."""
        assert Writer.normalize(path) == expected

    def test_parent_reference(self):
        """Test that paths leaving the output directory are rejected."""
        with pytest.raises(OutputError) as exc_info:
            Writer.normalize('./generated/../../etc/passwd')
        assert exc_info.value.output_path == './generated/../../etc/passwd'


class TestFileWriter:
    """Tests for writing to disk."""

    def test_write_creates_folders(self, tmp_path):
        """Test that parent folders are created and the content is written."""
        writer = FileWriter(tmp_path)
        written = writer.write('./generated/api/Contoso.json', '{}\n')
        target = tmp_path / 'generated' / 'api' / 'Contoso.json'
        assert target.read_text() == '{}\n'
        assert written == str(target)
        assert writer.get_written_files() == [written]

    def test_no_temporary_files_left(self, tmp_path):
        """Test that only the target file remains after a write."""
        writer = FileWriter(tmp_path)
        writer.write('Contoso.csproj', '<Project />')
        writer.write('Contoso.csproj', '<Project Sdk="Microsoft.NET.Sdk" />')
        assert [p.name for p in tmp_path.iterdir()] == ['Contoso.csproj']
        assert (tmp_path / 'Contoso.csproj').read_text() == '<Project Sdk="Microsoft.NET.Sdk" />'

    def test_content_type_is_accepted(self, tmp_path):
        """Test that a content type does not change what is written."""
        FileWriter(tmp_path).write('Contoso.csproj', '<Project />', 'source-file-csharp')
        assert (tmp_path / 'Contoso.csproj').read_text() == '<Project />'

    def test_line_endings_are_kept(self, tmp_path):
        """Test that content is written without newline translation."""
        FileWriter(tmp_path).write('.gitattributes', '* text=auto\r\n')
        assert (tmp_path / '.gitattributes').read_bytes() == b'* text=auto\r\n'

    def test_write_failure(self, tmp_path):
        """Test that filesystem errors are wrapped in OutputError."""
        (tmp_path / 'generated').write_text('not a folder')
        with pytest.raises(OutputError) as exc_info:
            FileWriter(tmp_path).write('generated/api/Contoso.json', '{}')
        assert isinstance(exc_info.value.cause, OSError)

    def test_escape_is_rejected(self, tmp_path):
        """Test that nothing is written outside the output directory."""
        with pytest.raises(OutputError):
            FileWriter(tmp_path / 'out').write('../Contoso.csproj', '')
        assert not (tmp_path / 'Contoso.csproj').exists()

    def test_written_files_is_a_copy(self, tmp_path):
        """Test that callers cannot change the writer's bookkeeping."""
        writer = FileWriter(tmp_path)
        writer.write('a.txt', 'a')
        writer.get_written_files().clear()
        assert len(writer.get_written_files()) == 1


class TestMemoryWriter:
    """Tests for the in-memory writer."""

    def test_files(self):
        """Test that files are keyed by normalized path."""
        writer = MemoryWriter()
        assert writer.write('./generated/api/Contoso.json', '{}') == 'generated/api/Contoso.json'
        assert writer.files == {'generated/api/Contoso.json': '{}'}

    def test_content_type(self):
        """Test that the content type is kept per file."""
        writer = MemoryWriter()
        writer.write('./Contoso.csproj', '<Project />', 'source-file-csharp')
        writer.write('.gitignore', 'bin\n')
        assert writer.content_types == {'Contoso.csproj': 'source-file-csharp', '.gitignore': None}

    def test_overwrite(self):
        """Test that the last write of a path wins."""
        writer = MemoryWriter()
        writer.write('./a.txt', 'first')
        writer.write('a.txt', 'second')
        assert writer.files == {'a.txt': 'second'}

"""
Tests for client credential parsing and validation
"""

import dataclasses

import pytest

from edgegrid_sdk import ClientCredential, CredentialError, InvalidCredential, MissingField
from edgegrid_sdk.credential import find_value


CREDENTIAL_TEXT = """
[default]
clientToken: akab-client-token-xxx
accessToken: akab-access-token-xxx
secret: SOMESECRETxxxxxxxxxxxxxxxxxxxxxxxxx=
host: akab-host-xxx.luna.akamaiapis.net
"""


class TestClientCredential:
    """Test credential construction"""

    def test_valid_credential(self):
        """Test creating a credential"""
        credential = ClientCredential("client", "access", "secret")
        assert credential.client_token == "client"
        assert credential.access_token == "access"
        assert credential.secret == "secret"
        assert credential.host is None

    @pytest.mark.parametrize("field_name", ["client_token", "access_token", "secret"])
    def test_empty_fields_rejected(self, field_name):
        """Test that every required field must be non-empty"""
        values = {"client_token": "client", "access_token": "access", "secret": "secret"}
        values[field_name] = ""

        with pytest.raises(InvalidCredential) as exc_info:
            ClientCredential(**values)

        assert str(exc_info.value) == f"{field_name} cannot be empty."
        assert exc_info.value.error_code == "INVALID_CREDENTIAL"

    def test_none_field_rejected(self):
        """Test that None is treated as empty"""
        with pytest.raises(InvalidCredential):
            ClientCredential("client", None, "secret")

    def test_immutable(self):
        """Test that credentials cannot be modified"""
        credential = ClientCredential("client", "access", "secret")
        with pytest.raises(dataclasses.FrozenInstanceError):
            credential.secret = "other"

    def test_secret_hidden_from_repr(self):
        """Test that the secret does not leak through repr"""
        credential = ClientCredential("client", "access", "very-secret-value")
        assert "very-secret-value" not in repr(credential)
        assert "client" in repr(credential)

    def test_equality(self):
        """Test value equality"""
        assert ClientCredential("c", "a", "s") == ClientCredential("c", "a", "s")
        assert ClientCredential("c", "a", "s") != ClientCredential("c", "a", "t")


class TestKeyValueParsing:
    """Test parsing credentials from key-value text"""

    def test_parse_full_text(self):
        """Test parsing all keys including host"""
        credential = ClientCredential.from_key_value_text(CREDENTIAL_TEXT)

        assert credential.client_token == "akab-client-token-xxx"
        assert credential.access_token == "akab-access-token-xxx"
        assert credential.secret == "SOMESECRETxxxxxxxxxxxxxxxxxxxxxxxxx="
        assert credential.host == "akab-host-xxx.luna.akamaiapis.net"

    def test_order_and_extra_content_ignored(self):
        """Test that key order and unrelated lines do not matter"""
        text = "# comment\nsecret:s3\nmax_body = 131072\naccessToken:\ta2\nclientToken:   c1\n"
        credential = ClientCredential.from_key_value_text(text)

        assert (credential.client_token, credential.access_token, credential.secret) == ("c1", "a2", "s3")
        assert credential.host is None

    def test_value_on_next_line(self):
        """Test that whitespace between key and value may include newlines"""
        credential = ClientCredential.from_key_value_text(
            "clientToken:\n  c1\naccessToken: a2\nsecret: s3"
        )
        assert credential.client_token == "c1"

    def test_value_kept_verbatim(self):
        """Test that values are not trimmed of punctuation"""
        credential = ClientCredential.from_key_value_text(
            "clientToken: c1;\naccessToken: \"a2\"\nsecret: s3=="
        )
        assert credential.client_token == "c1;"
        assert credential.access_token == "\"a2\""
        assert credential.secret == "s3=="

    def test_first_occurrence_wins(self):
        """Test that the first occurrence of a key is used"""
        credential = ClientCredential.from_key_value_text(
            "clientToken: first\nclientToken: second\naccessToken: a\nsecret: s"
        )
        assert credential.client_token == "first"

    @pytest.mark.parametrize("missing", ["clientToken", "accessToken", "secret"])
    def test_missing_key(self, missing):
        """Test that a missing key raises MissingField"""
        lines = {"clientToken": "c", "accessToken": "a", "secret": "s"}
        del lines[missing]
        text = "\n".join(f"{key}: {value}" for key, value in lines.items())

        with pytest.raises(MissingField) as exc_info:
            ClientCredential.from_key_value_text(text)

        assert exc_info.value.field == missing
        assert str(exc_info.value) == f"Could not find value for key: {missing}"

    def test_key_without_value(self):
        """Test that a key with nothing after it counts as missing"""
        with pytest.raises(MissingField) as exc_info:
            ClientCredential.from_key_value_text("clientToken: c\naccessToken: a\nsecret:   \n")
        assert exc_info.value.field == "secret"

    def test_find_value(self):
        """Test the raw value scanner"""
        assert find_value("a: 1 b: 2", "b") == "2"
        assert find_value("key:value", "key") == "value"
        assert find_value("key:", "key") is None
        assert find_value("nothing here", "key") is None

    def test_keys_case_sensitive(self):
        """Test that key matching is case-sensitive"""
        with pytest.raises(MissingField):
            ClientCredential.from_key_value_text("clienttoken: c\naccessToken: a\nsecret: s")


class TestCredentialFile:
    """Test loading credentials from files"""

    def test_from_file(self, tmp_path):
        """Test loading a credential file"""
        path = tmp_path / "credentials.txt"
        path.write_text(CREDENTIAL_TEXT, encoding='utf-8')

        credential = ClientCredential.from_file(path)
        assert credential.client_token == "akab-client-token-xxx"

        # String paths work too
        assert ClientCredential.from_file(str(path)) == credential

    def test_missing_file(self, tmp_path):
        """Test reading a file that does not exist"""
        with pytest.raises(CredentialError) as exc_info:
            ClientCredential.from_file(tmp_path / "missing.txt")
        assert exc_info.value.error_code == "FILE_ERROR"

    def test_empty_path(self):
        """Test that an empty path is rejected"""
        with pytest.raises(InvalidCredential):
            ClientCredential.from_file("")

    def test_incomplete_file(self, tmp_path):
        """Test a file missing the secret"""
        path = tmp_path / "credentials.txt"
        path.write_text("clientToken: c\naccessToken: a\n", encoding='utf-8')

        with pytest.raises(MissingField) as exc_info:
            ClientCredential.from_file(path)
        assert exc_info.value.field == "secret"

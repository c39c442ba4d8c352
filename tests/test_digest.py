"""
Tests for the Argon2id credential digest engine.
"""
import pytest

from core.digest import SALT_LENGTH, DigestEngine, DigestType


@pytest.fixture
def salt():
    return bytes(range(SALT_LENGTH))


class TestGenerateSalt:

    def test_salt_length(self, digests):
        assert len(digests.generate_salt()) == SALT_LENGTH

    def test_salts_are_random(self, digests):
        assert digests.generate_salt() != digests.generate_salt()


class TestDigest:

    def test_output_has_configured_length(self, digests, salt):
        assert len(digests.digest(b"secret", salt, DigestType.PASSWORD)) == 192

    def test_deterministic(self, digests, salt):
        first = digests.digest(b"secret", salt, DigestType.PASSWORD)
        second = digests.digest(b"secret", salt, DigestType.PASSWORD)
        assert first == second

    def test_domain_separation(self, digests, salt):
        password = digests.digest(b"secret", salt, DigestType.PASSWORD)
        data = digests.digest(b"secret", salt, DigestType.DATA)
        assert password != data

    def test_salt_changes_output(self, digests, salt):
        other_salt = bytes(reversed(salt))
        assert digests.digest(b"secret", salt, DigestType.DATA) != digests.digest(
            b"secret", other_salt, DigestType.DATA
        )

    def test_input_changes_output(self, digests, salt):
        assert digests.digest(b"secret", salt, DigestType.DATA) != digests.digest(
            b"secreT", salt, DigestType.DATA
        )

    def test_empty_input_is_hashable(self, digests, salt):
        assert len(digests.digest(b"", salt, DigestType.PASSWORD)) == 192

    def test_cost_parameters_change_output(self, digests, salt):
        costlier = DigestEngine(time_cost=2, memory_cost=64, parallelism=1, hash_len=192)
        assert costlier.digest(b"secret", salt, DigestType.PASSWORD) != digests.digest(
            b"secret", salt, DigestType.PASSWORD
        )

    @pytest.mark.parametrize("length", [0, 16, 31, 33])
    def test_wrong_salt_length_rejected(self, digests, length):
        with pytest.raises(ValueError):
            digests.digest(b"secret", bytes(length), DigestType.PASSWORD)


class TestParameters:

    def test_associated_data_is_type_name(self):
        assert DigestType.PASSWORD.associated_data == b"PASSWORD"
        assert DigestType.DATA.associated_data == b"DATA"

    def test_memory_below_lane_minimum_rejected(self):
        with pytest.raises(ValueError):
            DigestEngine(time_cost=1, memory_cost=8, parallelism=4)

    def test_zero_time_cost_rejected(self):
        with pytest.raises(ValueError):
            DigestEngine(time_cost=0)

    def test_from_settings_uses_configured_costs(self):
        engine = DigestEngine.from_settings()
        assert engine.time_cost == 1
        assert engine.memory_cost == 64
        assert engine.parallelism == 1

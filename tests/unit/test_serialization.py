"""Tests for the verification input wire format."""

import dataclasses

import pytest

from zkspend.core.pedersen import CURVE_ORDER
from zkspend.core.types import MerkleProof
from zkspend.exceptions import MalformedInputError
from zkspend.utils.serialization import deserialize_input, serialize_input

# Fixed prefix: wallet, nullifier, commitment, amount, blinding, salt, timestamp
PATH_LEN_OFFSET = 20 + 32 + 32 + 8 + 32 + 32 + 8


class TestSerializeInput:
    """Tests for encoding."""

    def test_field_offsets(self, scenario_input):
        """Test each field lands at its fixed offset."""
        data = serialize_input(scenario_input)
        note = scenario_input.spend_note
        commitment = note.amount_commitment

        assert data[0:20] == note.wallet
        assert data[20:52] == note.nullifier
        assert data[52:84] == commitment.commitment
        assert data[84:92] == (1_000_000).to_bytes(8, "big")
        assert data[92:124] == commitment.blinding_factor.to_bytes(32, "big")
        assert data[124:156] == note.nullifier_data.salt
        assert data[156:164] == note.nullifier_data.timestamp.to_bytes(8, "big")
        assert data[164:168] == (3).to_bytes(4, "big")

    def test_path_and_trailer(self, scenario_input):
        """Test path, direction bytes, root and expected amount follow the header."""
        data = serialize_input(scenario_input)
        proof = scenario_input.merkle_proof
        path_end = PATH_LEN_OFFSET + 4 + 3 * 32

        assert data[PATH_LEN_OFFSET + 4:path_end] == b"".join(proof.path)
        assert data[path_end:path_end + 3] == b"\x01\x00\x01"
        assert data[path_end + 3:path_end + 35] == scenario_input.merkle_root
        assert data[path_end + 35:] == (1_000_000).to_bytes(8, "big")
        assert len(data) == path_end + 43

    def test_decode_restores_input(self, scenario_input):
        """Test decoding gives back an equal input."""
        assert deserialize_input(serialize_input(scenario_input)) == scenario_input

    def test_empty_path(self, scenario_input):
        """Test depth-0 inputs encode with a zero path length."""
        spend_input = dataclasses.replace(scenario_input, merkle_proof=MerkleProof(path=[], indices=[]))
        data = serialize_input(spend_input)
        assert data[PATH_LEN_OFFSET:PATH_LEN_OFFSET + 4] == b"\x00\x00\x00\x00"
        assert deserialize_input(data).merkle_proof.depth == 0

    def test_rejects_malformed(self, scenario_input):
        """Test encoding validates field widths."""
        bad = dataclasses.replace(scenario_input, merkle_root=b"\x00" * 31)
        with pytest.raises(MalformedInputError):
            serialize_input(bad)

    def test_rejects_unreduced_blinding(self, scenario_input):
        """Test encoding refuses to reduce a blinding factor modulo the group order."""
        note = scenario_input.spend_note
        commitment = dataclasses.replace(
            note.amount_commitment, blinding_factor=note.amount_commitment.blinding_factor + CURVE_ORDER
        )
        bad = dataclasses.replace(scenario_input, spend_note=dataclasses.replace(note, amount_commitment=commitment))
        with pytest.raises(MalformedInputError):
            serialize_input(bad)


class TestDeserializeInput:
    """Tests for strict decoding."""

    def test_truncated(self, scenario_input):
        """Test every truncation point is rejected."""
        data = serialize_input(scenario_input)
        for cut in (0, 19, PATH_LEN_OFFSET + 2, len(data) - 1):
            with pytest.raises(MalformedInputError):
                deserialize_input(data[:cut])

    def test_trailing_bytes(self, scenario_input):
        """Test over-long input is rejected."""
        with pytest.raises(MalformedInputError):
            deserialize_input(serialize_input(scenario_input) + b"\x00")

    def test_non_boolean_index(self, scenario_input):
        """Test direction bytes other than 0 and 1 are rejected."""
        data = bytearray(serialize_input(scenario_input))
        data[PATH_LEN_OFFSET + 4 + 3 * 32] = 0x02
        with pytest.raises(MalformedInputError):
            deserialize_input(bytes(data))

    def test_path_length_over_limit(self, scenario_input):
        """Test a declared path length above the maximum is rejected."""
        data = bytearray(serialize_input(scenario_input))
        data[PATH_LEN_OFFSET:PATH_LEN_OFFSET + 4] = (257).to_bytes(4, "big")
        with pytest.raises(MalformedInputError):
            deserialize_input(bytes(data))

    def test_non_canonical_blinding(self, scenario_input):
        """Test blinding factors not reduced modulo the group order are rejected."""
        data = bytearray(serialize_input(scenario_input))
        data[92:124] = CURVE_ORDER.to_bytes(32, "big")
        with pytest.raises(MalformedInputError):
            deserialize_input(bytes(data))

    def test_not_bytes(self):
        """Test non-bytes input is rejected."""
        with pytest.raises(MalformedInputError):
            deserialize_input("00" * 200)

#!/usr/bin/env python3
"""
Quick start guide for private spend verification.

Run this to see a complete workflow example.
"""

import dataclasses
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from zkspend.config import configure_logging
from zkspend.core.engine import compute_leaf_hash
from zkspend.core.merkle_tree import MerkleTree
from zkspend.core.zkproof import ProofGenerator, ProofVerifier
from zkspend.crypto.backend import LocalProvingBackend
from zkspend.crypto.nullifier import NullifierSet
from zkspend.exceptions import DoubleSpendError, OutputMismatchError


def main():
    """Run a simple example of a private spend."""
    configure_logging()

    print("=" * 70)
    print("PRIVATE SPEND QUICK START EXAMPLE")
    print("=" * 70)
    print()

    # Step 1: Set up the proving backend and an accumulator
    print("Step 1: Initialize backend and Merkle tree")
    print("-" * 70)
    backend = LocalProvingBackend()
    tree = MerkleTree(tree_height=8)
    generator = ProofGenerator(backend)
    verifier = ProofVerifier(backend)
    spent = NullifierSet()
    print("✓ Tree created with 8 levels (supports 256 notes)")
    print()

    # Step 2: Alice mints a note
    print("Step 2: Alice mints a note worth 1,000,000 (private)")
    print("-" * 70)
    alice_wallet = bytes.fromhex("a1" * 20)
    note = generator.mint_note(alice_wallet, 1_000_000)
    index = tree.insert(compute_leaf_hash(note))
    print(f"✓ Note committed")
    print(f"  Commitment: {note.amount_commitment.commitment.hex()[:32]}...")
    print(f"  Tree Index: {index}")
    print()

    # Step 3: Other notes join the tree
    print("Step 3: Bob mints two notes")
    print("-" * 70)
    bob_wallet = bytes.fromhex("b0" * 20)
    for amount in (250, 750):
        tree.insert(compute_leaf_hash(generator.mint_note(bob_wallet, amount)))
    print(f"✓ Tree now holds {len(tree)} notes")
    print(f"  Root: {tree.root.hex()[:32]}...")
    print()

    # Step 4: Alice proves her spend
    print("Step 4: Alice proves her spend")
    print("-" * 70)
    proof = generator.prove_note(note, tree.get_proof(index), tree.root)
    print(f"✓ Proof generated")
    print(f"  Nullifier: {proof.nullifier.hex()[:32]}...")
    print(f"  Amount: {proof.amount}")
    print()

    # Step 5: Verify and record the nullifier
    print("Step 5: Verifier checks the proof")
    print("-" * 70)
    outputs = verifier.verify_spend(proof)
    spent.ensure_unspent(outputs.nullifier)
    spent.register(outputs.nullifier, merkle_root=outputs.merkle_root)
    print(f"✓ Spend accepted, {spent.size} nullifier(s) spent")
    print()

    # Step 6: Attacks
    print("Step 6: Attempted replay and tampering")
    print("-" * 70)
    try:
        spent.ensure_unspent(verifier.verify_spend(proof).nullifier)
    except DoubleSpendError as e:
        print(f"✓ Replay rejected: {e}")

    inflated = dataclasses.replace(proof, amount=proof.amount + 1)
    try:
        verifier.verify_spend(inflated)
    except OutputMismatchError as e:
        print(f"✓ Inflated claim rejected on field '{e.field}'")
    print()

    print("=" * 70)
    print("DONE")
    print("=" * 70)


if __name__ == "__main__":
    main()

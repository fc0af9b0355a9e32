"""Protocol constants of the deployed Traction program."""

from __future__ import annotations

from solders.pubkey import Pubkey

TRACTION_PROGRAM_ID: Pubkey = Pubkey.from_string("TRXf3r361YRfV6Zktov3nvdEqJwAuCowkjh4PUUBYEc")

# Owner of every protocol fee token account. PDA of [b"TractionDAOFees"], bump 255.
FEE_OWNER: Pubkey = Pubkey.from_string("2DDSpDyRbu9gZbcp2JCq2ZaA9FrCzXzoiyiGLyUFYSP5")
FEE_OWNER_BUMP: int = 255
FEE_OWNER_SEED: bytes = b"TractionDAOFees"

CRATE_TOKEN_PROGRAM_ID: Pubkey = Pubkey.from_string("CRATwLpu6YZEeiVq9ajjxs61wPQ9f29s1UoQR9siJCRs")
CRATE_TOKEN_SEED: bytes = b"CrateToken"

OPTIONS_CONTRACT_SEED: bytes = b"OptionsContract"

# Units of the underlying the on-chain strike is denominated in.
STRIKE_PRICE_UNITS: int = 1_000_000_000

# Exercise fee in thousandths of a basis point: 1_000 kbps == 1bp.
EXERCISE_FEE_KBPS: int = 1_000
EXERCISE_FEE_DENOMINATOR: int = 10_000 * 1_000

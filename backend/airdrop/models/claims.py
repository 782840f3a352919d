"""
Tortoise ORM models for the airdrop.

These models track:
- The one-time claim record (one row per identity that ever claimed)
- The signature kill switch and the current owner
- Wallet authentication challenges handed out to callers
"""

from tortoise import fields, models


class ClaimRecord(models.Model):
    """
    A committed claim.

    The unique constraint on `claimant` is the atomic check-and-set: a second
    insert for the same identity fails inside the claim transaction.
    """
    id = fields.UUIDField(pk=True)

    claimant = fields.CharField(max_length=42, unique=True)
    method = fields.CharField(max_length=20)
    recipient = fields.CharField(max_length=42, index=True)
    # uint256 does not fit a BIGINT; stored as a decimal string
    amount = fields.CharField(max_length=78)

    claimed_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "claim_records"


class SwitchState(models.Model):
    """One-way switches. A row exists only once the switch has been flipped."""
    name = fields.CharField(max_length=64, pk=True)
    changed_by = fields.CharField(max_length=42)
    changed_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "switch_states"


class OwnerState(models.Model):
    """Current owner after a transfer; no row means the configured owner."""
    name = fields.CharField(max_length=64, pk=True)
    address = fields.CharField(max_length=42)
    changed_by = fields.CharField(max_length=42)
    changed_at = fields.DatetimeField(auto_now=True)

    class Meta:
        table = "owner_states"


class AuthMessage(models.Model):
    """Outstanding wallet challenge; deleted once used."""
    wallet_address = fields.CharField(max_length=42, pk=True)
    message = fields.TextField()
    expires_at = fields.DatetimeField()
    created_at = fields.DatetimeField(auto_now_add=True)

    class Meta:
        table = "auth_messages"

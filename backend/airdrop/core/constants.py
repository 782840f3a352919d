# EIP-712 type strings (must match the off-chain signer byte for byte)
EIP712_DOMAIN_TYPE = b"EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"
CLAIM_TYPE = b"Claim(address claimer,uint256 amount)"

# EIP-191 version byte for structured data: digest = keccak(0x19 || 0x01 || domain || struct)
EIP712_VERSION_BYTE = b"\x01"

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"

# secp256k1 group order; signatures with s above half of it are malleable
SECP256K1_N = 0xFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141
SECP256K1_HALF_N = SECP256K1_N // 2

SIGNATURE_LENGTH = 65
HASH_LENGTH = 32
MAX_UINT256 = 2**256 - 1
MAX_UINT256_DIGITS = len(str(MAX_UINT256))

# Notification names
EVENT_MERKLE_CLAIM = "MerkleClaim"
EVENT_SIGNATURE_CLAIM = "SignatureClaim"
EVENT_ECDSA_DISABLED = "ECDSADisabled"
EVENT_OWNERSHIP_TRANSFERRED = "OwnershipTransferred"

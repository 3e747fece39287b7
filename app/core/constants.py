"""Application constants."""

# Password hashing cost (bcrypt log rounds)
BCRYPT_ROUNDS = 10

# Minimum length for new passwords (register, update, reset)
MIN_PASSWORD_LENGTH = 6

# Number of exercises returned by the sample workout generator
GENERATED_WORKOUT_SIZE = 5

# bcrypt only reads the first 72 bytes; longer passwords are rejected at validation
MAX_PASSWORD_LENGTH = 72

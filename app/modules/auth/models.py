# Farcaster sign-in
# This module owns no tables. Identities are anchored on the Farcaster FID and
# stored in the users table (see app/modules/users/models.py).

"""
Credential kinds accepted by AuthService:
- Session token: HS256 JWT issued by this service after sign-in.
  Claims: sub (users.id), fid (users.farcaster_id), iat, exp.
- Quick Auth JWT: issued by https://auth.farcaster.xyz to Farcaster mini apps.
  Claims: sub (FID), aud (our domain), iss, exp. Verified against the
  published JWKS.
- Neynar authorization code: exchanged at Neynar for an access token, which
  is then used to read the signed-in user's profile.

Every successful verification ends in UserService.reconcile and a fresh
session token.
"""

# Supabase Auth
# This module uses Supabase's built-in authentication system
# No custom tables are required - Supabase Auth handles:
# - User registration (auth.users table), with full_name kept in user_metadata
# - Password and magic link (OTP) sign-in
# - Password reset emails
# - JWT token generation and validation

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.sign_in_with_otp() - Email a magic sign-in link
- auth.reset_password_for_email() - Email a password reset link
- auth.get_user() - Get current user from JWT token
- auth.admin.sign_out(jwt) - Revoke the caller's session (on a throwaway client, never the shared one)
- auth.on_auth_state_change() - Session change notifications (see app.core.auth_context)

Application data about a user lives in the profiles table (app.modules.profiles).
"""

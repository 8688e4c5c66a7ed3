RESOLVE_PARTY_URL = "/rsvp/party"
LINK_IDENTITY_URL = "/rsvp/link"
SUBMIT_RSVP_URL = "/rsvp/submit"
UPDATE_CONTACT_INFO_URL = "/rsvp/update-info"

ADMIN_GUESTS_URL = "/admin/guests"
ADMIN_GUEST_URL = "/admin/guests/{guest_id}"
ADMIN_RESEND_INVITATION_URL = "/admin/guests/{guest_id}/resend-invitation"
ADMIN_BULK_SEND_INVITATIONS_URL = "/admin/guests/bulk-send-email"

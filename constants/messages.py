# User-facing toast / alert text for the profile edit page.

NO_USER = "No user found"
SAVE_OK = "Profile saved successfully!"
SAVE_FAILED = "Failed to save profile"
IMAGE_OK = "Profile image updated!"
IMAGE_FAILED = "Image upload failed"
STATES_LOAD_FAILED = "Failed to load states"
SERVICES_LOAD_FAILED = "Failed to load services"

DELETE_CONFIRM_HEADER = "Confirm"
DELETE_CONFIRM_MESSAGE = "Are you sure you want to submit a delete request for your account?"
DELETE_CONFIRM_NO = "No"
DELETE_CONFIRM_YES = "Yes, Proceed"
PROFILE_LOAD_FAILED = "Failed to load profile"
PROFILE_NOT_LOADED = "Your profile could not be loaded. Please try again before saving."

from flask import Blueprint, current_app, g, jsonify, request
from pydantic import ValidationError

from auth import admin_required, end_session, login_required, start_session
from schemas import (
    AboutContentSchema, AssetUpdateSchema, AssetUploadSchema, COLLECTION_SCHEMAS,
    ContactSchema, HeroContentSchema, LoginSchema, RegisterSchema, SiteSettingSchema,
    format_errors,
)
from storage import storage

api = Blueprint("api", __name__, url_prefix="/api")


def _body():
    return request.get_json(silent=True) or {}


def _invalid(message, error):
    return jsonify({"message": message, "errors": format_errors(error)}), 400


def _failed(message):
    current_app.logger.exception(message)
    return jsonify({"message": message}), 500


def _not_found(message):
    return jsonify({"message": message}), 404


## AUTHENTICATION ROUTES ##

@api.route('/auth/register', methods=['POST'])
def register():
    try:
        # Only the very first account can be created here, and it is always an admin
        if storage.count_users() > 0:
            return jsonify({"message": "Registration is closed"}), 403

        try:
            payload = RegisterSchema.model_validate(_body())
        except ValidationError as e:
            return _invalid("Invalid user data", e)

        user = storage.register_first_admin(
            payload.username,
            payload.password,
            email=payload.email,
            full_name=payload.full_name,
        )
        if user is None:
            # Another registration won the race
            return jsonify({"message": "Registration is closed"}), 403

        response = jsonify({"message": "User registered successfully", "user": user.to_dict()})
        response.status_code = 201
    except Exception:
        return _failed("Failed to register user")

    try:
        return start_session(response, user)
    except Exception:
        # The account is committed and registration is now closed
        return _failed("User registered, but the session could not be started. Please log in")


@api.route('/auth/login', methods=['POST'])
def login():
    try:
        payload = LoginSchema.model_validate(_body())
    except ValidationError as e:
        return _invalid("Username and password are required", e)

    try:
        user = storage.validate_user_password(payload.username, payload.password)
        if user is None:
            return jsonify({"message": "Invalid credentials"}), 401

        response = jsonify({"message": "Logged in successfully", "user": user.to_dict()})
        return start_session(response, user)
    except Exception:
        return _failed("Failed to login")


@api.route('/auth/logout', methods=['POST'])
def logout():
    try:
        return end_session(jsonify({"message": "Logged out successfully"}))
    except Exception:
        return _failed("Failed to logout")


@api.route('/auth/check', methods=['GET'])
@login_required
def check_auth():
    return jsonify({"authenticated": True, "user": g.user})


## CONTACT ROUTES ##

@api.route('/contact', methods=['POST'])
def submit_contact():
    try:
        payload = ContactSchema.model_validate(_body())
    except ValidationError as e:
        return _invalid("Invalid form data", e)

    try:
        submission = storage.create_contact_submission(payload.sent_fields())
    except Exception:
        return _failed("Failed to send message")
    return jsonify({"message": "Message sent successfully", "submissionId": submission.id}), 201


@api.route('/contact', methods=['GET'])
@admin_required
def list_contact_submissions():
    try:
        submissions = storage.get_all_contact_submissions()
    except Exception:
        return _failed("Failed to fetch submissions")
    return jsonify([s.to_dict() for s in submissions])


@api.route('/contact/<int:submission_id>', methods=['GET'])
@admin_required
def get_contact_submission(submission_id):
    try:
        submission = storage.get_contact_submission(submission_id)
    except Exception:
        return _failed("Failed to fetch submission")
    if submission is None:
        return _not_found("Submission not found")
    return jsonify(submission.to_dict())


## SITE SETTINGS ROUTES ##

@api.route('/settings', methods=['GET'])
def list_settings():
    try:
        settings = storage.get_all_site_settings()
    except Exception:
        return _failed("Failed to fetch settings")
    return jsonify([s.to_dict() for s in settings])


@api.route('/settings/<key>', methods=['GET'])
def get_setting(key):
    try:
        setting = storage.get_site_setting(key)
    except Exception:
        return _failed("Failed to fetch setting")
    if setting is None:
        return _not_found("Setting not found")
    return jsonify(setting.to_dict())


@api.route('/settings', methods=['POST'])
@admin_required
def update_setting():
    try:
        payload = SiteSettingSchema.model_validate(_body())
    except ValidationError as e:
        return _invalid("Key and value are required", e)

    try:
        setting = storage.set_site_setting(payload.key, payload.value, payload.type)
    except Exception:
        return _failed("Failed to update setting")
    return jsonify(setting.to_dict())


## SINGLETON CONTENT ROUTES ##

def _register_singleton(name, schema, getter, updater):
    def read():
        try:
            content = getter()
        except Exception:
            return _failed(f"Failed to fetch {name} content")
        return jsonify(content.to_dict() if content else {})

    @admin_required
    def write():
        try:
            payload = schema.model_validate(_body())
        except ValidationError as e:
            return _invalid(f"Invalid {name} content", e)
        try:
            content = updater(payload.sent_fields())
        except Exception:
            return _failed(f"Failed to update {name} content")
        return jsonify(content.to_dict())

    api.add_url_rule(f'/content/{name}', f'get_{name}_content', read, methods=['GET'])
    api.add_url_rule(f'/content/{name}', f'update_{name}_content', write, methods=['POST'])


_register_singleton("hero", HeroContentSchema, storage.get_hero_content, storage.update_hero_content)
_register_singleton("about", AboutContentSchema, storage.get_about_content, storage.update_about_content)


## COLLECTION CONTENT ROUTES ##

def _register_collection(name, collection, create_schema, update_schema, label):
    title = label[0].upper() + label[1:]

    def list_items():
        try:
            items = collection.list()
        except Exception:
            return _failed(f"Failed to fetch {name}")
        return jsonify([item.to_dict() for item in items])

    def get_item(item_id):
        try:
            item = collection.get(item_id)
        except Exception:
            return _failed(f"Failed to fetch {label}")
        if item is None:
            return _not_found(f"{title} not found")
        return jsonify(item.to_dict())

    @admin_required
    def create_item():
        try:
            payload = create_schema.model_validate(_body())
        except ValidationError as e:
            return _invalid(f"Invalid {label} data", e)
        try:
            item = collection.create(payload.sent_fields())
        except Exception:
            return _failed(f"Failed to create {label}")
        return jsonify(item.to_dict()), 201

    @admin_required
    def update_item(item_id):
        try:
            payload = update_schema.model_validate(_body())
        except ValidationError as e:
            return _invalid(f"Invalid {label} data", e)
        try:
            item = collection.update(item_id, payload.sent_fields())
        except Exception:
            return _failed(f"Failed to update {label}")
        if item is None:
            return _not_found(f"{title} not found")
        return jsonify(item.to_dict())

    @admin_required
    def delete_item(item_id):
        try:
            collection.delete(item_id)
        except Exception:
            return _failed(f"Failed to delete {label}")
        return '', 204

    api.add_url_rule(f'/content/{name}', f'list_{name}', list_items, methods=['GET'])
    api.add_url_rule(f'/content/{name}', f'create_{name}', create_item, methods=['POST'])
    api.add_url_rule(f'/content/{name}/<int:item_id>', f'get_{name}', get_item, methods=['GET'])
    api.add_url_rule(f'/content/{name}/<int:item_id>', f'update_{name}', update_item,
                     methods=['PUT', 'PATCH'])
    api.add_url_rule(f'/content/{name}/<int:item_id>', f'delete_{name}', delete_item,
                     methods=['DELETE'])


for _name, (_create, _update, _label) in COLLECTION_SCHEMAS.items():
    _register_collection(_name, storage.collection(_name), _create, _update, _label)


## ASSET ROUTES ##

@api.route('/upload', methods=['POST'])
@admin_required
def upload_asset():
    try:
        payload = AssetUploadSchema.model_validate(_body())
    except ValidationError as e:
        return _invalid("Missing required file information", e)

    try:
        asset = storage.create_site_asset(payload.sent_fields())
    except Exception:
        return _failed("Failed to upload file")
    # Metadata only, the client already holds the payload
    return jsonify({"message": "File uploaded successfully", "asset": asset.metadata_dict()}), 201


@api.route('/assets/<section>', methods=['GET'])
def list_assets(section):
    try:
        assets = storage.get_site_assets_by_section(section)
    except Exception:
        return _failed("Failed to fetch assets")
    return jsonify([asset.metadata_dict() for asset in assets])


@api.route('/assets/file/<int:asset_id>', methods=['GET'])
def get_asset_file(asset_id):
    try:
        asset = storage.get_site_asset(asset_id)
    except Exception:
        return _failed("Failed to fetch asset")
    if asset is None:
        return _not_found("Asset not found")
    return jsonify(asset.to_dict())


@api.route('/assets/<int:asset_id>', methods=['PATCH'])
@admin_required
def update_asset(asset_id):
    try:
        payload = AssetUpdateSchema.model_validate(_body())
    except ValidationError as e:
        return _invalid("Invalid file information", e)
    try:
        asset = storage.update_site_asset(asset_id, payload.sent_fields())
    except Exception:
        return _failed("Failed to update asset")
    if asset is None:
        return _not_found("Asset not found")
    return jsonify(asset.metadata_dict())


@api.route('/assets/<int:asset_id>', methods=['DELETE'])
@admin_required
def delete_asset(asset_id):
    try:
        storage.delete_site_asset(asset_id)
    except Exception:
        return _failed("Failed to delete asset")
    return '', 204

from chalice import Chalice

from chalicelib import images, restaurants, riders, notifications

app = Chalice(app_name='food-delivery-admin')

app.api.binary_types.insert(0, 'multipart/form-data')
app.debug = False


@app.route('/health-check', methods=['GET'])
def health_check():
    return {'health': 'check'}


# RESTAURANTS
@app.route('/restaurants/create', methods=['POST'], cors=True)
def create_restaurant():
    """
    creates owner account, restaurant and owner link
    """
    return restaurants.endpoint_create_restaurant(app.current_request)


@app.route('/restaurants/delete', methods=['POST'], cors=True)
def delete_restaurant():
    """
    deletes the restaurant with orders, menu, coupons and payouts
    """
    return restaurants.endpoint_delete_restaurant(app.current_request)


@app.route('/restaurants/update-password', methods=['POST'], cors=True)
def update_restaurant_password():
    return restaurants.endpoint_update_restaurant_password(app.current_request)


@app.route('/restaurants/upload-image', methods=['POST'], content_types=['multipart/form-data'], cors=True)
def upload_restaurant_image():
    """
    form fields file and restaurantId, responds with the public url of the image
    """
    return images.endpoint_upload_restaurant_image(app.current_request)


# RIDERS
@app.route('/riders', methods=['POST'], cors=True)
def register_rider():
    """
    rider signs in with phone number, responds with the created profile
    """
    return riders.endpoint_register_rider(app.current_request)


@app.route('/riders/create', methods=['POST'], cors=True)
def create_rider():
    """
    generated login and password, the password is only returned here
    """
    return riders.endpoint_create_rider(app.current_request)


@app.route('/riders/delete', methods=['POST'], cors=True)
def delete_rider():
    return riders.endpoint_delete_rider(app.current_request)


@app.route('/riders/reset-password', methods=['POST'], cors=True)
def reset_rider_password():
    return riders.endpoint_reset_rider_password(app.current_request)


# NOTIFICATIONS
@app.route('/send-notification', methods=['POST'], cors=True)
def send_notification():
    return notifications.endpoint_send_notifications(app.current_request)

# Every table lives in the general table under its own partkey,
# the sortkey is the record id unless stated otherwise.
restaurants_pk = 'restaurants'
orders_pk = 'orders'
order_items_pk = 'order_items'
order_assignments_pk = 'order_assignments'
deliveries_pk = 'deliveries'
ratings_pk = 'ratings'
menu_items_pk = 'menu_items'
coupons_pk = 'coupons'
payouts_pk = 'payouts'
profiles_pk = 'profiles'
rider_live_status_pk = 'rider_live_status'

# sortkey = restaurant_id
restaurant_owners_pk = 'restaurant_owners'

record_sk = '{record_id}'

sortkey_columns = {
    restaurant_owners_pk: 'restaurant_id'
}

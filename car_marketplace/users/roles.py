from rolepermissions.roles import AbstractUserRole


class Admin(AbstractUserRole):
    available_permissions = {
        'manage_inventory': True,
        'moderate_reviews': True,
        'recompute_ratings': True,
    }


class Buyer(AbstractUserRole):
    available_permissions = {
        'view_cars': True,
        'write_reviews': True,
    }

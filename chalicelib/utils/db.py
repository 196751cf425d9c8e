import functools
import os
from typing import Dict, List, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from chalicelib.utils import exceptions
from chalicelib.utils.boto_clients import aws_config_ddb
from chalicelib.utils.logger import logger, log_exception

wrapped_table_methods = ('put_item', 'update_item', 'query')

_DB = None


def db_call(func):
    """
    should be used for any atomic
    put/update/query call in the code
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f'{func.__name__}:: args={args}, kwargs={kwargs}')
        try:
            result = func(*args, **kwargs)
        except (ClientError, BotoCoreError) as e:
            log_exception(e, msg=f'Got exception while trying to {func.__name__}: ')
            raise exceptions.DownstreamError(str(e)) from e
        logger.info(f'{func.__name__}:: SUCCESS')
        return result

    return wrapper


def get_gen_table():
    global _DB
    if _DB is None:
        table_name = os.environ.get('GEN_TABLE_NAME')
        if os.environ.get('ENDPOINT_URL'):
            table = boto3.resource('dynamodb', endpoint_url=os.environ.get('ENDPOINT_URL')).Table(table_name)
        else:
            table = boto3.resource('dynamodb', config=aws_config_ddb).Table(table_name)

        for method_name in wrapped_table_methods:
            setattr(table, method_name, db_call(getattr(table, method_name)))
        _DB = table

    return _DB


def put_db_record(item: dict, overwrite: bool = True, table=get_gen_table):
    kwargs = {'Item': item}
    if not overwrite:
        kwargs['ConditionExpression'] = 'attribute_not_exists(sortkey)'
    table().put_item(**kwargs)


def update_db_record(key: dict, update_body: dict, table=get_gen_table):
    """
    Sets every attribute of update_body, attributes with None value are removed
    """
    update_expression, expr_attr_names, expr_attr_values = generate_update_expression(update_body)
    if not update_expression:
        return None
    update_item_dict = {
        'Key': key,
        'UpdateExpression': update_expression,
        'ExpressionAttributeNames': expr_attr_names,
        'ReturnValues': 'UPDATED_NEW'
    }
    if expr_attr_values:
        update_item_dict['ExpressionAttributeValues'] = expr_attr_values
    return table().update_item(**update_item_dict)


def generate_update_expression(update_body: dict):
    """
    Generate one expression which updates and deletes attributes.
    if a value of update_body is None - the attribute is deleted, else - attribute is updated
    """
    expr_attr_names = {}
    expr_attr_values = {}
    set_parts = []
    remove_parts = []
    for field, value in update_body.items():
        expr_attr_names[f'#{field}'] = field
        if value is None:
            remove_parts.append(f'#{field}')
        else:
            expr_attr_values[f':{field}'] = value
            set_parts.append(f'#{field}=:{field}')

    expression = []
    if set_parts:
        expression.append('SET ' + ', '.join(set_parts))
    if remove_parts:
        expression.append('REMOVE ' + ', '.join(remove_parts))
    return ' '.join(expression), expr_attr_names, expr_attr_values


def query_items_paginated(
        key_condition_expression,
        filter_expression=None,
        projection_fields: Optional[List[str]] = None,
        table=get_gen_table,
        start_key=None
):
    kwargs = {'KeyConditionExpression': key_condition_expression}
    if filter_expression is not None:
        kwargs.update({'FilterExpression': filter_expression})

    if projection_fields:
        kwargs.update({
            'ProjectionExpression': ', '.join(f'#p_{field}' for field in projection_fields),
            'ExpressionAttributeNames': {f'#p_{field}': field for field in projection_fields}
        })

    if start_key:
        kwargs.update({'ExclusiveStartKey': start_key})

    resp = table().query(**kwargs)
    return resp['Items'], resp.get('LastEvaluatedKey')


def query_items_paged(key_condition_expression, filter_expression=None, projection_fields=None,
                      table=get_gen_table) -> List[Dict]:
    """ This method shall be used whenever you think the query will
        return more than 1mb of data at once"""
    all_items = []
    last_evaluated_key = None
    while True:
        items, last_evaluated_key = query_items_paginated(
            key_condition_expression,
            filter_expression=filter_expression,
            projection_fields=projection_fields,
            table=table,
            start_key=last_evaluated_key
        )
        all_items.extend(items)
        if last_evaluated_key is None:
            return all_items


def delete_db_records(keys: List[Dict], table=get_gen_table) -> None:
    if not keys:
        return
    try:
        with table().batch_writer() as batch:
            for key in keys:
                batch.delete_item(Key=key)
    except (ClientError, BotoCoreError) as e:
        log_exception(e, msg='Got exception while trying to batch delete: ')
        raise exceptions.DownstreamError(str(e)) from e
    logger.info(f'delete_db_records:: SUCCESS, {len(keys)} records deleted')

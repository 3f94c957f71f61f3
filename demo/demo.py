import logging
import sys

from flagengine import FeatureClient, UserContext

root = logging.getLogger()
root.setLevel(logging.DEBUG)

ch = logging.StreamHandler(sys.stdout)
ch.setLevel(logging.DEBUG)
formatter = logging.Formatter('%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s')
ch.setFormatter(formatter)
root.addHandler(ch)

DOCUMENT = {
    'groups': [
        {
            'id': 'checkout',
            'description': 'Checkout experiments',
            'features': [
                {
                    'id': 'new-checkout',
                    'description': 'Redesigned checkout flow',
                    'type': 'boolean',
                    'value': False,
                    'segments': [
                        {'combo': {'plan': ['pro'], 'region': ['!EU']}, 'value': True, 'rollout': {'percentage': 50, 'secondaryValue': False}},
                    ],
                },
            ],
        },
    ],
}

if __name__ == '__main__':
    client = FeatureClient(DOCUMENT)

    user = UserContext.from_text('userKey', 'plan=pro\nregion=US')
    result = client.evaluate('new-checkout', user)
    print(result.value)
    for line in result.reasoning:
        print('  ' + line)

    for row in client.simulate('new-checkout', user.attributes, 1000):
        print('%s: %d users (%.2f%%)' % (row.value, row.count, row.percentage))
